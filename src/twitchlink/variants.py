import collections.abc
import enum
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from .errors import QualityUnavailable, StreamOffline


class Variant(NamedTuple):
    resolution: str
    bandwidth: str
    link: str
    # None is the source variant ("chunked"), which outranks every
    # numeric quality.
    quality_rank: Optional[int]
    label: str

    @classmethod
    def source(cls, link: str, resolution: str = "", bandwidth: str = "") -> "Variant":
        return cls(resolution, bandwidth, link, None, "best")

    @classmethod
    def ranked(
        cls, rank: int, link: str, resolution: str = "", bandwidth: str = ""
    ) -> "Variant":
        return cls(resolution, bandwidth, link, rank, f"{rank}p")

    # quality_rank is an internal sort key and is never serialized.
    def to_json(self) -> Dict[str, str]:
        return dict(
            resolution=self.resolution,
            bandwidth=self.bandwidth,
            link=self.link,
            type=self.label,
        )


class DisplayItem(NamedTuple):
    quality: str
    resolution: str
    bitrate: str

    @classmethod
    def from_variant(cls, variant: Variant) -> "DisplayItem":
        return cls(variant.label, variant.resolution, variant.bandwidth)

    def to_json(self) -> Dict[str, str]:
        return dict(self._asdict())

    # Non-numeric bitrates are shown as reported.
    def __str__(self) -> str:
        try:
            rate = "{:>8.2f}".format(float(self.bitrate or 0) / 1024)
        except ValueError:
            rate = "{:>8}".format(self.bitrate)
        return f"[{self.quality}] {self.resolution:>10} @ {rate} kbps"


class Quality(enum.Enum):
    BEST = "best"
    LOWEST = "lowest"
    CUSTOM = "custom"


class QualityPolicy(NamedTuple):
    quality: Quality
    label: Optional[str] = None

    @classmethod
    def best(cls) -> "QualityPolicy":
        return cls(Quality.BEST)

    @classmethod
    def lowest(cls) -> "QualityPolicy":
        return cls(Quality.LOWEST)

    @classmethod
    def custom(cls, label: str) -> "QualityPolicy":
        return cls(Quality.CUSTOM, label)

    # Parses a user-supplied quality string, e.g. "best", "worst", "720p".
    @classmethod
    def parse(cls, text: str) -> "QualityPolicy":
        text = text.strip().lower()
        if text in ("best", "highest"):
            return cls.best()
        if text in ("worst", "lowest"):
            return cls.lowest()
        return cls.custom(text)


# "720" and "720P" both become "720p".
def normalize_label(label: str) -> str:
    label = label.strip().lower()
    if not label.endswith("p"):
        label += "p"
    return label


VariantCollection = Union[Mapping[Any, Variant], Iterable[Variant]]


def _variant_sort_key(variant: Variant) -> Tuple[int, int]:
    if variant.quality_rank is None:
        return (0, 0)
    return (1, -variant.quality_rank)


# Source variant first, then numeric qualities from highest to lowest.
def order_variants(variants: VariantCollection) -> List[Variant]:
    if isinstance(variants, collections.abc.Mapping):
        variants = variants.values()
    return sorted(variants, key=_variant_sort_key)


# Picks exactly one variant according to policy.
#
# channel is only used to make error messages more helpful.
def select_variant(
    variants: VariantCollection, policy: QualityPolicy, *, channel: str = None
) -> Variant:
    ordered = order_variants(variants)
    if not ordered:
        raise StreamOffline(channel)

    if policy.quality is Quality.BEST:
        return ordered[0]
    if policy.quality is Quality.LOWEST:
        return ordered[-1]

    label = normalize_label(policy.label or "")
    for variant in ordered:
        if variant.label == label:
            return variant
    raise QualityUnavailable(label, channel)

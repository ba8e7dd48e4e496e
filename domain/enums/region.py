"""Region enumeration for League of Legends servers."""
from enum import Enum


class Region(Enum):
    """League of Legends platform hosts.

    Provides:
    - platform_route: platform host (e.g., na1), used by league endpoints
    - regional_route: routing host for match endpoints (e.g., americas)
    """

    # Americas
    NA1 = "na1"
    BR1 = "br1"
    LA1 = "la1"
    LA2 = "la2"

    # Europe
    EUW1 = "euw1"
    EUN1 = "eun1"
    TR1 = "tr1"
    RU = "ru"
    ME1 = "me1"

    # Asia
    KR = "kr"
    JP1 = "jp1"

    # SEA & Oceania
    OC1 = "oc1"
    PH2 = "ph2"
    SG2 = "sg2"
    TH2 = "th2"
    TW2 = "tw2"
    VN2 = "vn2"

    @property
    def platform_route(self) -> str:
        return self.value

    @property
    def regional_route(self) -> str:
        if self in (Region.NA1, Region.BR1, Region.LA1, Region.LA2):
            return "americas"
        if self in (Region.KR, Region.JP1):
            return "asia"
        if self in (Region.OC1, Region.PH2, Region.SG2, Region.TH2, Region.TW2, Region.VN2):
            return "sea"
        return "europe"

    @classmethod
    def from_platform(cls, platform: str) -> 'Region':
        """Resolve a platform id such as ``"NA1"`` or ``"na1"``."""
        try:
            return cls(platform.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown platform {platform!r}") from None

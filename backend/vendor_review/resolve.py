"""
VendorResolver - Rule-Based Remittance Vendor Identification.

Maps a transaction memo to one of three verdicts:
- excluded: a known non-remittance service, dropped from every report
- recognized: a known remittance provider, under its canonical label
- unknown: no rule matched, kept visible under the sentinel vendor

Matching is case-insensitive substring search. No fuzzy matching.
"""
from typing import List, Optional, Tuple

from .models import VendorVerdict, EXCLUDED, RECOGNIZED, UNKNOWN


# ─────────────────────────────────────────────────────────────
# Exclusion Rules
# ─────────────────────────────────────────────────────────────
# Checked before any vendor rule. A hit here always wins.

NON_REMITTANCE_PATTERNS = [
    'APPLE COM BILL',
    'APPLE CASH',
    'Disney Plus',
    'SpotifyUS',
    'METRO BY T MOBIL',
    'SIE PLAYSTATIONN',
    'PROGRESSIVE LEAS',
    'PAYPAL',
    'Chime',
    'PCA*SKY DANCER CASINO',
    'CASH APP',
]

# ─────────────────────────────────────────────────────────────
# Vendor Rules
# ─────────────────────────────────────────────────────────────
# (memo pattern, canonical label). Order is significant: first match wins.

VENDOR_PATTERNS: List[Tuple[str, str]] = [
    ('RIA Financial Services', 'RIA'),
    ('Ria Money Transfer', 'RIA'),
    ('RMTLY', 'Remitly'),
    ('Remitly', 'Remitly'),
    ('Felix Pago', 'Felix Pago'),
    ('Taptap Send', 'TapTap Send'),
    ('TapTap Send', 'TapTap Send'),
    ('BOSS MONEY', 'Boss Money'),
    ('BOSSREVOLUTIONMONEYXFE', 'Boss Money'),
    ('PANGEA MONEY TRANSFER', 'Pangea'),
    ('WorldRemit', 'WorldRemit'),
    ('WU DIGITAL USA', 'Western Union'),
    ('XOOM', 'Xoom'),
    ('ASTRA*MyBambu', 'MyBambu'),
    ('MONEYGRAM US ONLINE', 'MoneyGram'),
    ('MoneyGram', 'MoneyGram'),
    ('VIAMERICAS', 'Viamericas'),
    ('SERVICIO UNITELLER', 'Uniteller'),
    ('UNITELLER', 'Uniteller'),
    ('MAXITRANSFERS', 'MaxiTransfers'),
    ('OMN*MONEY TRANSF', 'Omni Money Transfer'),
    ('PNM*Tornado Bus', 'Tornado Bus'),
]


class VendorResolver:
    """
    Deterministic memo-to-vendor resolver.

    Usage:
        resolver = VendorResolver()
        verdict = resolver.resolve("RIA Financial Services payment")
        # verdict.kind == "recognized", verdict.vendor == "RIA"
    """

    def __init__(self,
                 exclusions: Optional[List[str]] = None,
                 vendors: Optional[List[Tuple[str, str]]] = None):
        """
        Args:
            exclusions: Optional list replacing NON_REMITTANCE_PATTERNS
            vendors: Optional ordered (pattern, label) list replacing VENDOR_PATTERNS
        """
        self.exclusions = list(exclusions if exclusions is not None else NON_REMITTANCE_PATTERNS)
        self.vendors = list(vendors if vendors is not None else VENDOR_PATTERNS)
        # Upper-cased once; order preserved
        self._exclusions_upper = [p.upper() for p in self.exclusions]
        self._vendors_upper = [(p.upper(), p, label) for p, label in self.vendors]

    def resolve(self, summary: Optional[str]) -> VendorVerdict:
        """
        Resolve a memo to a vendor verdict. Always returns a verdict.

        Args:
            summary: Free-text memo; None is treated as empty

        Returns:
            VendorVerdict
        """
        summary_upper = (summary or "").upper()

        for pattern, pattern_upper in zip(self.exclusions, self._exclusions_upper):
            if pattern_upper in summary_upper:
                return VendorVerdict(EXCLUDED, pattern=pattern)

        for pattern_upper, pattern, label in self._vendors_upper:
            if pattern_upper in summary_upper:
                return VendorVerdict(RECOGNIZED, vendor=label, pattern=pattern)

        return VendorVerdict(UNKNOWN)

    def get_rules(self) -> dict:
        """Return copies of both rule tables for transparency/audit."""
        return {
            "exclusions": list(self.exclusions),
            "vendors": list(self.vendors),
        }


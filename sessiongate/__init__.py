"""sessiongate: session credential issuance, verification and revocation."""

__version__ = "0.1.0"

"""tvlai: three-valued abstract interpretation of p-code instruction streams."""

__version__ = "0.1.0"

"""vclight-create -- scaffold new VCLight projects."""

__version__ = "0.1.0"

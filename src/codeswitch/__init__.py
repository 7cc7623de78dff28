"""codeswitch — jump to a git repository by (part of) its name."""

__version__ = "0.1.0"

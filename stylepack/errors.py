class StylePackError(Exception):
    """Base class for style pack errors."""


class PackLoadError(StylePackError):
    """The pack manifest is missing or invalid; the pack cannot be used."""


class PackComponentWarning(StylePackError):
    """One component file failed to load.

    The loader records the message and substitutes a default component,
    so this never reaches callers of load_pack.
    """

    def __init__(self, component: str, reason: str):
        self.component = component
        self.reason = reason
        super().__init__(f"Failed to load {component}: {reason}")


class RuleCompileWarning(StylePackError):
    """A single pattern rule could not be compiled and is skipped."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")

class ResumeBuilderError(Exception):
    """Base class for errors raised by this service."""


class DependencyConfigError(ResumeBuilderError):
    """A required external dependency is missing or misconfigured."""


class ResumeContentError(ResumeBuilderError, ValueError):
    """Stored resume content cannot be coerced into the expected shape."""


class ResumeImportError(ResumeBuilderError, ValueError):
    """An uploaded resume file cannot be read."""

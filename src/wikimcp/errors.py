"""Error taxonomy for the Wiki.js MCP server.

Every error except ``ConfigurationError`` is recovered at the dispatcher
boundary and reported to the MCP host as an error-flagged text result.
"""


class WikiMCPError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(WikiMCPError):
    """Required settings are missing; the server cannot start."""


class InvalidArgument(WikiMCPError):
    """Tool arguments failed shape validation."""


class UnknownTool(WikiMCPError):
    """No tool is registered under the requested name."""


class NotFound(WikiMCPError):
    """No page matched the given id or path."""


class UpstreamError(WikiMCPError):
    """The wiki server or the network failed the request."""

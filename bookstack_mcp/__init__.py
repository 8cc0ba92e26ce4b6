"""
BookStack MCP server package.

This package exposes the BookStack REST API as MCP tools and resources:
- Books, pages, chapters and shelves (including exports)
- Users, roles and content permissions
- Attachments and image gallery
- Search, recycle bin, audit log and system info

The server core is a registry of catalog entries plus a dispatcher that
routes tool calls and resource reads to them. It runs over stdio or HTTP.
"""

__version__ = "1.0.0"

"""Entry point for the content-versioning MCP server."""

from content_versioning.server import create_server


def main() -> None:
    """Run the content-versioning MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()

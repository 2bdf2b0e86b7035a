"""
Live check against the CourtListener API

Runs a few tools through the same guarded client the servers use and prints
the rendered text. Anonymous access works; set COURTLISTENER_API_TOKEN for
authenticated limits.
"""
import asyncio

from courtlistener_mcp.config.settings import settings
from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.core.guard import client_identity
from courtlistener_mcp.mcp.tools import run_tool
from courtlistener_mcp.utils.logger import get_logger

logger = get_logger(__name__)

CHECKS = [
    ("get-court", {"court_id": "scotus"}),
    ("list-courts", {"jurisdiction": "F", "in_use": True, "limit": 3}),
    ("search-dockets", {"q": "privacy", "court": "scotus", "limit": 2}),
    ("search-clusters", {"case_name": "Marbury", "limit": 2}),
]


async def main():
    """Run each check and print the result"""

    if not settings.courtlistener_api_token:
        print("COURTLISTENER_API_TOKEN is not set; using anonymous access.")
        print()

    client = CourtListenerClient.from_settings(settings)

    for index, (tool_name, arguments) in enumerate(CHECKS, 1):
        print("=" * 80)
        print(f"Check {index}: {tool_name} {arguments}")
        print("-" * 80)

        logger.info(f"Running {tool_name}")
        text = await run_tool(
            tool_name,
            arguments,
            client,
            site_url=settings.courtlistener_site_url,
            preview_length=settings.max_text_preview_length,
        )
        print(text)
        print()

    print("=" * 80)
    identity = client_identity(settings.courtlistener_api_token)
    print(f"Done. Remaining requests in window: {client.rate_limiter.remaining(identity)}")
    print("=" * 80)


if __name__ == "__main__":
    asyncio.run(main())

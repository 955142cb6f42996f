import asyncio

from src.mcp_server.server import main

asyncio.run(main())

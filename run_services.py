import asyncio
import uvicorn


async def start_server():
    config = uvicorn.Config(
        "bms_service.app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=True,
    )
    server = uvicorn.Server(config)
    await server.serve()

if __name__ == "__main__":
    try:
        asyncio.run(start_server())
    except KeyboardInterrupt:
        print("\nShutting down server...")

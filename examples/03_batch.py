"""
Batch operations - Many file operations in one request
"""
import asyncio
import os
from pathlib import Path
from gaiapy import GaiaClient


async def main():
    private_key = os.environ["GAIA_APP_PRIVATE_KEY"]
    documents = Path.home() / "Documents"

    tree = {
        "values": [
            {
                # Uploads ~/Documents/images/team.jpg as images/team.jpg
                "values": [
                    {"id": "img-1", "type": "putFile", "path": "file://images/team.jpg", "content": ""},
                ],
                "isSequential": False,
                "nItemsForNs": 10,
            },
            {"id": "link-1", "type": "putFile", "path": "links/1.json", "content": '{"url": "example.com"}'},
            {"id": "old", "type": "deleteFile", "path": "links/0.json", "doIgnoreDoesNotExistError": True},
        ],
        "isSequential": True,
        "nItemsForNs": 10,
    }

    async with GaiaClient("my_app", private_key=private_key) as gaia:
        result = await gaia.perform_files(tree, base_dir=str(documents))
        print(f"Hub answered: {result}")


if __name__ == "__main__":
    asyncio.run(main())

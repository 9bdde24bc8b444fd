"""
Basic usage - Store and read encrypted files
"""
import asyncio
import os
from gaiapy import GaiaClient


async def main():
    private_key = os.environ["GAIA_APP_PRIVATE_KEY"]

    # Session mode (saves the hub session to my_app.session)
    async with GaiaClient("my_app", private_key=private_key) as gaia:

        # Encrypted by default
        url = await gaia.put_file("notes/today.txt", "remember the milk")
        print(f"Stored at {url}")

        content = await gaia.get_file("notes/today.txt")
        print(f"Read back: {content.data}")

        # List everything in the bucket
        print("\nFiles:")
        async for name in gaia.iter_files():
            print(f"  {name}")


if __name__ == "__main__":
    asyncio.run(main())

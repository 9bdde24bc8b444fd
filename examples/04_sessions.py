"""
Session management - Hub session persistence
"""
import asyncio
import os
from gaiapy import GaiaClient, UserIdentity, SQLiteSession


async def main():
    private_key = os.environ["GAIA_APP_PRIVATE_KEY"]

    # Method 1: Session file (first run performs the hub handshake,
    # next runs restore the saved session)
    client = GaiaClient("my_app", private_key=private_key)
    session = await client.connect()
    print(f"Connected to {session.hub_base_url} as {session.storage_address}")
    await client.close()

    # Method 2: Explicit identity on a custom hub, custom storage
    identity = UserIdentity(private_key=private_key, hub_url="https://hub.example.com")
    async with GaiaClient(SQLiteSession("custom_hub"), identity=identity) as gaia:
        print(f"Session: {gaia.session}")

    # Sign out: forget the hub session, including the saved copy
    async with GaiaClient("my_app", private_key=private_key) as gaia:
        await gaia.sign_out()
        print("Signed out!")


if __name__ == "__main__":
    asyncio.run(main())

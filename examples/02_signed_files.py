"""
Signed files and reading another user's storage
"""
import asyncio
import os
from gaiapy import GaiaClient, MultiplayerTarget, GaiaSignatureVerificationError


class DirectoryResolver:
    """Resolves usernames from a fixed table."""

    def __init__(self, buckets):
        self.buckets = buckets

    async def get_app_bucket_url(self, target):
        return self.buckets[target.username]


async def main():
    private_key = os.environ["GAIA_APP_PRIVATE_KEY"]
    resolver = DirectoryResolver({
        "bob.id": os.environ["BOB_BUCKET_URL"],
    })

    async with GaiaClient(private_key=private_key, resolver=resolver) as gaia:

        # Public, signed: uploads status.txt and status.txt.sig
        await gaia.put_file("status.txt", "online", encrypt=False, sign=True)

        # Read Bob's public status and check his signature
        bob = MultiplayerTarget("bob.id", "https://app.example.com", "https://core.example.com/v1/names")
        try:
            status = await gaia.get_file("status.txt", decrypt=False, verify=True, multiplayer=bob)
            print(f"Bob is {status.data}")
        except GaiaSignatureVerificationError as e:
            print(f"Bob's status is not signed by Bob: {e}")

        # Remove the file and its signature
        await gaia.delete_file("status.txt", was_signed=True, ignore_missing=True)


if __name__ == "__main__":
    asyncio.run(main())

"""Generate synthetic users for testing and development purposes."""

import asyncio
import os
import random

from mimesis import Cryptographic, Locale, Person

from accountstore import create_account_store, exceptions

LOCALES = list(Locale)
COUNT = int(os.environ.get('COUNT', '100'))


def _get_locale() -> Locale:
    return random.choice(LOCALES)


async def main() -> None:
    store = await create_account_store()
    crypto = Cryptographic()
    for i in range(COUNT):
        person = Person(_get_locale())
        username = person.username()
        email = person.email()
        password = person.password()
        try:
            await store.register_user(username, email, password, password)
        except exceptions.RegistrationConflict:
            continue
        user = await store.check_user(username, password)
        try:
            for _ in range(random.randint(0, store.max_list_size)):
                await store.add_favourite(user.user_id, crypto.uuid())
            for _ in range(random.randint(0, store.max_list_size)):
                await store.add_history(user.user_id, crypto.uuid())
        except exceptions.ListFull:
            pass    # History is gated on favourites by default.
        print('\t'.join([email, username, password]))


if __name__ == '__main__':
    asyncio.run(main())

import asyncio
from typing import Any

from storecall import MemoryStore, NormalizedResult, create_middleware

TYPES = ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"]


class App:
    """Tiny dispatch host: a state dict and a reducer at the end of the chain."""

    def __init__(self, store: MemoryStore) -> None:
        self.state: dict[str, Any] = {"loading": False, "users": {}, "ids": []}
        self.dispatch = create_middleware(store)(self)(self.reduce)

    def get_state(self) -> dict[str, Any]:
        return self.state

    def reduce(self, action: dict[str, Any]) -> dict[str, Any]:
        print(f"-> {action['type']}")
        if action["type"] == "USERS_REQUEST":
            self.state = {**self.state, "loading": True}
        elif action["type"] == "USERS_SUCCESS":
            result: NormalizedResult = action["payload"]
            self.state = {
                **self.state,
                "loading": False,
                "users": {**self.state["users"], **result.entities["users"]},
                "ids": result.ids,
            }
        elif action["type"] == "USERS_FAILURE":
            print(f"   failed: {action['meta']}")
            self.state = {**self.state, "loading": False}
        return action


def users(method: str, **query: Any) -> dict[str, Any]:
    return {
        "CALL_STORE": {
            "types": TYPES,
            "schema": {"name": "users"},
            # Skip while another users call is in flight
            "bailout": lambda state: state["loading"],
            "query": {"collection": "users", "method": method, **query},
        }
    }


async def main() -> None:
    store = MemoryStore()
    store.put("users/ann", {"name": "Ann", "age": 31})
    store.put("users/kid", {"name": "Kid", "age": 9})

    app = App(store)

    await app.dispatch(users("get", where="age >= 18"))
    print(f"Adults: {app.state['ids']}")

    await app.dispatch(users("add", data={"name": "Bob", "age": 42}))
    await app.dispatch(users("update", doc="ann", data={"age": 32}))
    print(f"Known users: {sorted(app.state['users'])}")

    subscription = app.dispatch(users("onSnapshot", where="age >= 18"))
    store.put("users/cat", {"name": "Cat", "age": 50})
    print(f"Live adults: {app.state['ids']}")
    subscription.unsubscribe()

    try:
        await app.dispatch(users("update", doc="ghost", data={"age": 1}))
    except Exception as e:
        print(f"Caller sees: {type(e).__name__}")


if __name__ == "__main__":
    asyncio.run(main())

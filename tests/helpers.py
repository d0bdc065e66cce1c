"""Shared assertions for tests."""


def emitted(mock_bus) -> list[tuple[str, str]]:
    """(topic, event) pairs emitted on a mocked bus, in order."""
    return [(c.args[0], c.args[1]["event"]) for c in mock_bus.emit.call_args_list]


def emitted_payloads(mock_bus, topic: str, event: str) -> list[dict]:
    return [
        c.args[1]["data"]
        for c in mock_bus.emit.call_args_list
        if c.args[0] == topic and c.args[1]["event"] == event
    ]

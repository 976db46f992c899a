class RolloverError(Exception):
    pass


class ConfigError(RolloverError):
    pass


class StoreError(RolloverError):
    pass


class LockError(RolloverError):
    pass


class InboxNotFoundError(ConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Inbox list "{name}" not found. Please check your configuration.')

from django.apps import AppConfig


class FundraisingConfig(AppConfig):
    name = "fundraising"

    def ready(self) -> None:
        from fundraising import signals  # noqa: F401

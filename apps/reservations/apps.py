from django.apps import AppConfig  # type: ignore


class ReservationsConfig(AppConfig):
    name = "apps.reservations"
    verbose_name = "Reservations"

    def ready(self) -> None:
        from .application.bootstrap import bootstrap

        bootstrap()

"""
Django management command that runs the stock alert engine in the foreground
and prints every new notification
"""
import time

from django.core.management.base import BaseCommand

from backend.alerts.center import NotificationCenter
from backend.alerts.notifications import SEVERITY_ERROR, SEVERITY_WARNING
from backend.alerts.scheduler import AlertScheduler
from backend.alerts.sources import get_product_source


class PrintingCenter(NotificationCenter):
    """Center that echoes each cycle's new notifications"""

    def __init__(self, command, **kwargs):
        super().__init__(**kwargs)
        self.command = command

    def run_cycle(self):
        added = super().run_cycle()
        self.command.print_notifications(added)
        return added


class Command(BaseCommand):
    help = 'Check product stock levels and print low/critical stock notifications'

    def add_arguments(self, parser):
        parser.add_argument(
            '--interval',
            type=int,
            default=None,
            help='Seconds between checks (default: STOCK_ALERTS INTERVAL_SECONDS)',
        )
        parser.add_argument(
            '--once',
            action='store_true',
            help='Run a single check and exit',
        )
        parser.add_argument(
            '--source',
            choices=['database', 'supabase'],
            default=None,
            help='Product data source (default: STOCK_ALERTS PRODUCT_SOURCE)',
        )

    def handle(self, *args, **options):
        center = PrintingCenter(self, source=get_product_source(options.get('source')))

        if options.get('once'):
            center.run_cycle()
            return

        scheduler = AlertScheduler(center, interval=options.get('interval'), name='stock-alerts[cli]')
        scheduler.start()
        self.stdout.write(self.style.SUCCESS(f"Checking stock every {scheduler.interval}s, Ctrl+C to stop"))
        try:
            while scheduler.is_running:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stdout.write("")
        finally:
            scheduler.stop()

    def print_notifications(self, notifications):
        if not notifications:
            self.stdout.write("No new notifications")
            return
        for n in notifications:
            line = f"[{n.severity.upper()}] {n.title}: {n.message}"
            if n.severity == SEVERITY_ERROR:
                self.stdout.write(self.style.ERROR(line))
            elif n.severity == SEVERITY_WARNING:
                self.stdout.write(self.style.WARNING(line))
            else:
                self.stdout.write(line)

from django.core.management.base import BaseCommand, CommandError

from siteinfo.backend.pcre_engine import LinkTrailEngine, LinkTrailPatternError


class Command(BaseCommand):
    help = "Resolve a PHP link trail pattern (e.g. '/^([a-z]+)(.*)$/sD') into its trailing characters"
    requires_system_checks = []

    def add_arguments(self, parser):
        parser.add_argument("pattern", help="the linktrail value, delimiters and modifiers included")

    def handle(self, *args, **opts):
        try:
            engine = LinkTrailEngine(opts["pattern"])
        except LinkTrailPatternError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(engine.as_string())
        if opts["verbosity"] >= 1:
            self.stderr.write(self.style.SUCCESS(f"{len(engine)} characters"))

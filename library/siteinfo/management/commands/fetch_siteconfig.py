import logging
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from siteinfo.backend.extract import ExtractionError, configuration_source
from siteinfo.backend.generate import RENDERERS
from siteinfo.backend.siteinfo_service import SiteinfoError, fetch_query


class Command(BaseCommand):
    help = (
        "Fetch the site configuration of a MediaWiki based wiki and output code "
        "for a parse_wiki_text ConfigurationSource specific to that wiki. "
        "Generated code goes to stdout (or --output), log messages to stderr. "
        f"The log level is read from the {settings.LOG_VAR} environment variable "
        "(off, error, warn, info, debug, trace)."
    )
    requires_system_checks = []

    def add_arguments(self, parser):
        parser.add_argument("domain",
                            help="domain name of the wiki (e.g. en.wikipedia.org)")
        parser.add_argument("--format", choices=sorted(RENDERERS), default="rust",
                            help="rust: ConfigurationSource expression; json: the same sets as JSON")
        parser.add_argument("--output", default=None,
                            help="write the generated code to this file instead of stdout")

    def handle(self, *args, **opts):
        if opts["verbosity"] >= 2:
            logging.getLogger("siteinfo").setLevel(logging.DEBUG)

        try:
            query = fetch_query(opts["domain"])
        except SiteinfoError as exc:
            raise CommandError(f"siteinfo endpoint: {exc}") from exc

        try:
            source = configuration_source(query)
        except ExtractionError as exc:
            raise CommandError(f"cannot extract configuration data: {exc}") from exc

        text = RENDERERS[opts["format"]](source)

        if opts["output"]:
            out = Path(opts["output"])
            try:
                out.write_text(text, encoding="utf-8")
            except OSError as exc:
                raise CommandError(f"I/O error: {exc}") from exc
            self.stderr.write(self.style.SUCCESS(
                f"wrote ConfigurationSource for {opts['domain']} -> {out}"
            ))
        else:
            self.stdout.write(text, ending="")

"""
Main CLI interface for the options chain codec.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from ...application.config.settings import CodecConfig, ConfigManager
from ...application.use_cases.process_chain import ChainProcessingResult, ProcessChainUseCase
from ...data.schemas import load_chain_schema
from ...data.validators.sanity import OrderingPolicy
from ...infrastructure.error_handling import ChainCodecError, ConfigurationError, MalformedInputError
from ...infrastructure.monitoring.logger import setup_logging
from ..formatters.console_formatter import ConsoleFormatter
from ..formatters.table_formatter import TableFormatter, TableStyle

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2


class OptionsChainCLI:
    """
    Command-line interface for validating, checking and normalizing
    options chain documents.

    Exit codes: 0 when the document is valid, 1 when it decodes as JSON but
    is not a valid chain (or fails an error-level sanity check), 2 when it is
    unreadable, malformed, or the configuration is invalid.
    """

    def __init__(self):
        self.console_formatter = ConsoleFormatter()
        self.table_formatter = TableFormatter()

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point for CLI."""
        parser = self._create_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            return EXIT_INVALID

        try:
            config = ConfigManager(args.config).get_codec_config()
        except ConfigurationError as e:
            self.console_formatter.print_error(f"Configuration Error: {e.message}")
            return EXIT_UNREADABLE

        self.table_formatter = TableFormatter(style=TableStyle(args.table_style))
        self._configure_logging(args.log_level or config.logging.level, config.logging.json)

        try:
            return self._execute_command(args, config)
        except MalformedInputError as e:
            return self._report_malformed(args, e)
        except OSError as e:
            self.console_formatter.print_error(f"Cannot read {e.filename or args.file}: {e.strerror or e}")
            return EXIT_UNREADABLE
        except ChainCodecError as e:
            logger.debug("Codec error", exc_info=True)
            self.console_formatter.print_error(f"Codec Error: {e.message}")
            return EXIT_UNREADABLE

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog='options-chain',
            description="Validate and normalize options chain JSON documents",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        # Global options
        parser.add_argument(
            '--config',
            type=Path,
            default=None,
            help='YAML configuration file'
        )

        parser.add_argument(
            '--log-level',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default=None,
            help='Set logging level (overrides the configuration)'
        )

        parser.add_argument(
            '--output-format',
            choices=['table', 'json'],
            default='table',
            help='Output format'
        )

        parser.add_argument(
            '--table-style',
            choices=[style.value for style in TableStyle],
            default=TableStyle.GRID.value,
            help='Table layout for issue and summary listings'
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        validate_parser = subparsers.add_parser(
            'validate',
            help='Decode a chain document and report structural issues'
        )
        validate_parser.add_argument('file', type=Path, help='Chain document')

        check_parser = subparsers.add_parser(
            'check',
            help='Validate a chain document and run the sanity checks'
        )
        check_parser.add_argument('file', type=Path, help='Chain document')
        check_parser.add_argument(
            '--strict',
            action='store_true',
            default=None,
            help='Treat sanity warnings as errors'
        )
        check_parser.add_argument(
            '--ordering-policy',
            choices=[policy.value for policy in OrderingPolicy],
            default=None,
            help='How to treat out-of-order expirations and strikes'
        )

        normalize_parser = subparsers.add_parser(
            'normalize',
            help='Re-encode a valid chain document canonically'
        )
        normalize_parser.add_argument('file', type=Path, help='Chain document')
        normalize_parser.add_argument(
            '-o', '--output',
            type=Path,
            default=None,
            help='Write the normalized document here instead of stdout'
        )
        normalize_parser.add_argument(
            '--indent',
            type=int,
            default=None,
            help='Pretty-print with this indentation'
        )

        subparsers.add_parser(
            'schema',
            help='Print the JSON Schema of the chain document'
        )

        return parser

    def _configure_logging(self, log_level: str, enable_json: bool):
        """Configure logging; records go to stderr so stdout stays machine-readable."""
        setup_logging(log_level=log_level, enable_json=enable_json, stream=sys.stderr)

    def _execute_command(self, args, config: CodecConfig) -> int:
        """Execute CLI command."""
        if args.command == 'validate':
            return self._execute_validate(args, config)
        elif args.command == 'check':
            return self._execute_check(args, config)
        elif args.command == 'normalize':
            return self._execute_normalize(args, config)
        elif args.command == 'schema':
            return self._execute_schema(args)
        else:
            raise ValueError(f"Unknown command: {args.command}")

    def _execute_validate(self, args, config: CodecConfig) -> int:
        result = ProcessChainUseCase(config).validate(args.file)
        self._output_result(result, args.output_format)
        return EXIT_OK if result.is_valid else EXIT_INVALID

    def _execute_check(self, args, config: CodecConfig) -> int:
        overrides = {}
        if args.strict is not None:
            overrides['strict'] = args.strict
        if args.ordering_policy is not None:
            overrides['ordering_policy'] = OrderingPolicy(args.ordering_policy)

        result = ProcessChainUseCase(config).check(args.file, **overrides)
        self._output_result(result, args.output_format)
        return EXIT_OK if result.is_valid else EXIT_INVALID

    def _execute_normalize(self, args, config: CodecConfig) -> int:
        result = ProcessChainUseCase(config).normalize(args.file, output=args.output, indent=args.indent)

        if result.chain is None:
            self._output_result(result, args.output_format)
            return EXIT_INVALID

        if args.output is None:
            sys.stdout.write(result.encoded.decode('utf-8'))
            sys.stdout.write('\n')
        elif args.output_format == 'json':
            self.console_formatter.print_json({
                'source': result.source,
                'output': str(args.output),
                'size_bytes': len(result.encoded),
            })
        else:
            self.console_formatter.print_success(
                f"Wrote {len(result.encoded):,} bytes to {args.output}"
            )
        return EXIT_OK

    def _execute_schema(self, args) -> int:
        self.console_formatter.print_json(load_chain_schema())
        return EXIT_OK

    def _output_result(self, result: ChainProcessingResult, format_type: str):
        """Output result in specified format."""
        if format_type == 'json':
            self.console_formatter.print_json(result.to_dict())
            return

        if result.chain is None:
            self.console_formatter.print_error(f"{result.source}: {result.report.summary()}")
            self.table_formatter.print_issue_table(result.report.issues, title="Structural issues")
            return

        chain = result.chain
        self.table_formatter.print_summary_table({
            'symbol': chain.symbol,
            'last_price': chain.last_price,
            'last_update': chain.last_update.isoformat(),
            'expirations': len(chain.expirations),
            'strike_rows': chain.row_count,
        }, title=result.source)

        if result.sanity_report is None:
            self.console_formatter.print_success(f"{result.source}: valid options chain")
            return

        sanity = result.sanity_report
        if len(sanity):
            self.table_formatter.print_issue_table(sanity.issues, title="Sanity issues")

        if not sanity.is_valid:
            self.console_formatter.print_error(f"{result.source}: sanity check failed ({sanity.summary()})")
        elif sanity.has_warnings():
            self.console_formatter.print_warning(f"{result.source}: {sanity.summary()}")
        else:
            self.console_formatter.print_success(f"{result.source}: valid options chain, sanity checks passed")

    def _report_malformed(self, args, error: MalformedInputError) -> int:
        location = ""
        if error.line is not None:
            location = f" (line {error.line}, column {error.column}, byte {error.offset})"
        elif error.offset is not None:
            location = f" (byte {error.offset})"

        if args.output_format == 'json':
            self.console_formatter.print_json({
                'source': str(args.file),
                'valid': False,
                'malformed': error.to_dict(),
            })
        self.console_formatter.print_error(f"{args.file}: malformed input{location}: {error.message}")
        return EXIT_UNREADABLE


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    cli = OptionsChainCLI()
    return cli.run(argv)


if __name__ == '__main__':
    sys.exit(main())

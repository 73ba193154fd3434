"""
Chain document use cases: validate, sanity-check and normalize files.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config.settings import CodecConfig, SanityConfig
from ...data.models.chain import OptionsChain
from ...data.serialization.decoder import ChainDecoder
from ...data.serialization.encoder import ChainEncoder
from ...data.validators.results import ValidationReport
from ...data.validators.sanity import SanityChecker
from ...infrastructure.error_handling import MalformedInputError
from ...infrastructure.monitoring.logger import ChainLogger

logger = logging.getLogger(__name__)


@dataclass
class ChainProcessingResult:
    """Outcome of processing one chain document."""
    source: str
    chain: Optional[OptionsChain]
    report: ValidationReport
    sanity_report: Optional[ValidationReport] = None
    encoded: Optional[bytes] = None

    @property
    def is_valid(self) -> bool:
        if self.chain is None:
            return False
        if self.sanity_report is not None and not self.sanity_report.is_valid:
            return False
        return True

    def all_issues(self):
        issues = list(self.report.issues)
        if self.sanity_report is not None:
            issues.extend(self.sanity_report.issues)
        return issues

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "source": self.source,
            "valid": self.is_valid,
            "structure": self.report.to_dict(),
        }
        if self.chain is not None:
            result["symbol"] = self.chain.symbol
            result["expirations"] = len(self.chain.expirations)
            result["strike_rows"] = self.chain.row_count
        if self.sanity_report is not None:
            result["sanity"] = self.sanity_report.to_dict()
        return result


class ProcessChainUseCase:
    """
    Reads chain documents from disk and runs the codec over them.

    Malformed input propagates as ``MalformedInputError``; structural defects
    come back in the result's report.
    """

    def __init__(self, config: Optional[CodecConfig] = None):
        self.config = config or CodecConfig()
        self.decoder = ChainDecoder.from_config(self.config.decoder)
        self.encoder = ChainEncoder.from_config(self.config.encoder)

    def validate(self, path: Union[str, Path]) -> ChainProcessingResult:
        """Decode ``path`` and collect structural issues."""
        source = str(path)
        chain_logger = ChainLogger(source)
        data = Path(path).read_bytes()

        try:
            decoded = self.decoder.try_decode(data)
        except MalformedInputError as e:
            chain_logger.log_malformed(e, offset=e.offset)
            raise

        if decoded.ok:
            chain = decoded.chain
            chain_logger.log_decoded(chain.symbol, len(chain.expirations), chain.row_count)
        else:
            chain_logger.log_rejected(len(decoded.report.errors()))

        return ChainProcessingResult(source=source, chain=decoded.chain, report=decoded.report)

    def check(self, path: Union[str, Path], sanity: Optional[SanityConfig] = None, **overrides) -> ChainProcessingResult:
        """
        Decode ``path`` and, if it is structurally valid, run the sanity pass.

        Args:
            path: chain document
            sanity: sanity configuration; defaults to the configured one
            **overrides: individual ``SanityConfig`` fields to replace
        """
        result = self.validate(path)
        if result.chain is None:
            return result

        sanity_config = replace(sanity or self.config.sanity, **overrides)
        checker = SanityChecker.from_config(sanity_config)
        result.sanity_report = checker.check(result.chain)

        ChainLogger(result.source).log_sanity(
            result.sanity_report.summary(),
            errors=len(result.sanity_report.errors()),
            warnings=len(result.sanity_report.warnings()),
        )
        return result

    def normalize(self, path: Union[str, Path], output: Optional[Union[str, Path]] = None,
                  indent: Optional[int] = None) -> ChainProcessingResult:
        """
        Decode ``path`` and re-encode it canonically.

        The encoded bytes are written to ``output`` when given and kept on
        ``result.encoded``.
        """
        result = self.validate(path)
        if result.chain is None:
            return result

        encoder = self.encoder if indent is None else ChainEncoder(indent=indent, ensure_ascii=self.encoder.ensure_ascii)
        encoded = encoder.encode(result.chain)
        if output is not None:
            Path(output).write_bytes(encoded)
            logger.debug(f"Wrote normalized chain to {output}")

        ChainLogger(result.source).log_encoded(result.chain.symbol, len(encoded))
        result.encoded = encoded
        return result

"""Analyse a local transcript file with the same pipeline the API uses."""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analysis.analyzer import AnthropicTextGenerator, SamplingConfig, SegmentAnalyzer
from src.analysis.chunking import split_text
from src.analysis.errors import AnalysisError
from src.analysis.pipeline import AnalysisPipeline
from src.analysis.tokens import estimate_tokens
from src.analysis_config import AnalysisConfig, AnalysisKind
from src.config import settings


def analyze_file(path: str, kind: str, dry_run: bool = False) -> int:
    """Analyse the transcript at *path* and print the report.

    With *dry_run*, only print the routing decision and the chunk plan;
    no model call is made. Returns a process exit code.
    """
    text = Path(path).read_text(encoding="utf-8")
    config = AnalysisConfig.from_settings(settings)

    estimated = estimate_tokens(text, config.chars_per_token)
    print(f"{path}: {len(text)} characters, ~{estimated} tokens (budget {config.token_budget})")

    if dry_run:
        if estimated <= config.token_budget:
            print("Direct analysis (1 call)")
        else:
            chunks = split_text(text, config.token_budget, config.chars_per_token)
            print(f"Chunked analysis ({len(chunks)} calls)")
            for chunk in chunks:
                tokens = estimate_tokens(chunk.text, config.chars_per_token)
                print(f"  {chunk.label}: chars {chunk.start}-{chunk.end}, ~{tokens} tokens")
        return 0

    if not settings.anthropic_api_key:
        print("ANTHROPIC_API_KEY is not set.", file=sys.stderr)
        return 1

    generator = AnthropicTextGenerator(
        api_key=settings.anthropic_api_key,
        model=settings.llm_model,
        timeout=config.time_budget_seconds,
    )
    sampling = SamplingConfig(temperature=config.temperature, max_output_tokens=config.max_output_tokens)
    pipeline = AnalysisPipeline(SegmentAnalyzer(generator, sampling), config)

    try:
        result = pipeline.run(text, kind)
    except AnalysisError as e:
        print(f"ERROR [{e.code}] {e.message}" + (f": {e.details}" if e.details else ""), file=sys.stderr)
        return 1

    print(result.analysis)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("path")
    parser.add_argument(
        "--kind",
        default=AnalysisKind.GENERAL_SUMMARY.value,
        choices=[k.value for k in AnalysisKind],
    )
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()
    sys.exit(analyze_file(args.path, args.kind, args.dry_run))

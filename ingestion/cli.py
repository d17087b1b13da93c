"""
Command Line Interface for Document Ingestion

Provides CLI access to the ingestion pipeline:
- Full document ingestion (optionally stored as JSON)
- Individual analysis stages for debugging
- Remote summarization health check
- Configuration templates
"""

import argparse
import json
import sys
import logging
from pathlib import Path

from .config import ConfigManager, IngestionConfig
from .exceptions import IngestionError
from .extractors import extractor_for
from .keywords import KeywordExtractor
from .language import LanguageDetector
from .model_client import HuggingFaceSummarizationClient
from .normalizer import TextNormalizer
from .pipeline import IngestionPipeline
from .segmenter import StructureSegmenter
from .statistics import TextStatistics
from .store import JsonDocumentStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def add_log_file(log_file: str, level_name: str = "INFO"):
    """Also write log records to a file."""
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)


def load_text(path: str) -> str:
    """Extract and normalize the text of a PDF or TXT file."""
    file_path = Path(path)
    file_format = file_path.suffix.lower().lstrip(".")
    extracted = extractor_for(file_format).extract(file_path.read_bytes(), file_path.name)
    return TextNormalizer().normalize(extracted.text, pdf=file_format == "pdf")


def ingest_document(args, config: IngestionConfig) -> int:
    """Run the full pipeline on a file."""
    print(f"Ingesting: {args.file_path}")

    pipeline = IngestionPipeline(config)
    try:
        document = pipeline.ingest_file(args.file_path, title=args.title, author=args.author,
                                        description=args.description)
    finally:
        pipeline.close()

    if args.store_dir:
        document.id = JsonDocumentStore(args.store_dir).create(document)

    print("\n" + "="*60)
    print("INGESTION RESULTS")
    print("="*60)

    if document.id:
        print(f"Document ID: {document.id}")
    print(f"Title: {document.title}")
    print(f"Author: {document.author}")
    print(f"Pages: {document.total_pages}")
    print(f"Words: {document.stats.word_count}")
    print(f"Language: {document.stats.detected_language}")
    print(f"Reading time: {document.stats.reading_time_minutes} min")
    print(f"Sections: {len(document.chapters)}")
    print(f"Keywords: {', '.join(document.keywords)}")
    print(f"Sentiment: {document.sentiment.sentiment} ({document.sentiment.confidence:.2f})")
    print(f"Summary source: {document.summary_provenance}")

    print(f"\n{'='*40}")
    print("SUMMARY")
    print("="*40)
    print(document.summary)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"\nDocument saved to: {args.output}")

    return 0


def summarize_document(args, config: IngestionConfig) -> int:
    """Summarize a file without running the other stages."""
    pipeline = IngestionPipeline(config)
    try:
        result = pipeline.summarizer.summarize_with_provenance(
            load_text(args.file_path), custom_max_length=args.max_length
        )
    finally:
        pipeline.close()

    print(f"Source: {result.provenance.value}" + (f" ({result.model})" if result.model else ""))
    print(result.text)
    return 0


def show_keywords(args, config: IngestionConfig) -> int:
    """Print the keywords of a file."""
    keywords = KeywordExtractor().extract_keywords(load_text(args.file_path), args.max)
    for i, keyword in enumerate(keywords, 1):
        print(f"{i}. {keyword}")
    return 0


def show_stats(args, config: IngestionConfig) -> int:
    """Print text statistics of a file."""
    text = load_text(args.file_path)
    detector = LanguageDetector(default_language=config.processing.default_language)
    stats = TextStatistics(detector).compute_stats(text)

    print(json.dumps(stats.to_dict(), indent=2))
    if args.language_scores:
        print("\nLanguage scores:")
        for code, score in sorted(detector.scores(text).items(), key=lambda item: -item[1]):
            print(f"  {code}: {score}")
    return 0


def show_sections(args, config: IngestionConfig) -> int:
    """Print the sections detected in a file."""
    target_size = args.target_size or config.processing.segment_target_size
    sections = StructureSegmenter(target_size=target_size).segment(load_text(args.file_path))

    print(f"Found {len(sections)} sections:")
    for section in sections:
        print(f"  {section.id:3d}. {section.title[:50]:<50} "
              f"{section.word_count:6d} words  [{section.start_index}:{section.end_index}]")
    return 0


def check_health(args, config: IngestionConfig) -> int:
    """Check that the hosted summarization API answers."""
    if not config.apis.huggingface_api_key:
        print("✗ No HUGGINGFACE_API_KEY configured (summaries will be extractive)")
        return 1

    client = HuggingFaceSummarizationClient(
        api_key=config.apis.huggingface_api_key,
        api_url=config.models.api_url,
        timeout=config.models.timeout,
        health_check_model=config.models.fallback_model
    )
    try:
        healthy = client.ping()
    finally:
        client.close()

    if healthy:
        print(f"✓ Summarization API reachable ({config.models.api_url})")
        return 0
    print(f"✗ Summarization API not reachable ({config.models.api_url})")
    return 1


def manage_config(args, manager: ConfigManager) -> int:
    """Create configuration templates or validate the current configuration."""
    if args.action == 'sample':
        manager.create_sample_config(args.output)
        print(f"Sample configuration created as {args.output or 'ingestion.sample.json'}")
    elif args.action == 'env':
        manager.create_env_template(args.output)
        print(f"Environment template created as {args.output or '.env.template'}")
    else:
        manager.load_config()
        print("✓ Configuration is valid")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Document ingestion: extract, structure and summarize books",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest a book and store it as JSON
  ingest-books ingest my_book.pdf --store-dir ./data/documents

  # Summarize a text file
  ingest-books summarize notes.txt

  # Inspect detected chapters
  ingest-books segment my_book.pdf
        """
    )

    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--config', help='Path to JSON configuration file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    ingest_parser = subparsers.add_parser('ingest', help='Ingest a PDF or TXT file')
    ingest_parser.add_argument('file_path', help='Path to PDF or TXT file')
    ingest_parser.add_argument('--title', help='Document title (default: from file name)')
    ingest_parser.add_argument('--author', help='Document author')
    ingest_parser.add_argument('--description', default='', help='Document description')
    ingest_parser.add_argument('--store-dir', help='Store the document as JSON in this directory')
    ingest_parser.add_argument('--output', '-o', help='Write the document JSON to this file')

    summarize_parser = subparsers.add_parser('summarize', help='Summarize a file')
    summarize_parser.add_argument('file_path', help='Path to PDF or TXT file')
    summarize_parser.add_argument('--max-length', type=int, help='Override the summary max length')

    keywords_parser = subparsers.add_parser('keywords', help='Extract keywords from a file')
    keywords_parser.add_argument('file_path', help='Path to PDF or TXT file')
    keywords_parser.add_argument('--max', type=int, default=8, help='Maximum number of keywords')

    stats_parser = subparsers.add_parser('stats', help='Show text statistics of a file')
    stats_parser.add_argument('file_path', help='Path to PDF or TXT file')
    stats_parser.add_argument('--language-scores', action='store_true', help='Show language detection scores')

    segment_parser = subparsers.add_parser('segment', help='Show detected sections of a file')
    segment_parser.add_argument('file_path', help='Path to PDF or TXT file')
    segment_parser.add_argument('--target-size', type=int, help='Target characters per size-based section')

    subparsers.add_parser('health', help='Check the hosted summarization API')

    config_parser = subparsers.add_parser('config', help='Configuration templates and validation')
    config_parser.add_argument('action', choices=['sample', 'env', 'validate'])
    config_parser.add_argument('--output', help='Output path for templates')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    commands = {
        'ingest': ingest_document,
        'summarize': summarize_document,
        'keywords': show_keywords,
        'stats': show_stats,
        'segment': show_sections,
        'health': check_health,
    }

    try:
        manager = ConfigManager(args.config)
        if args.command == 'config':
            return manage_config(args, manager)

        config = manager.load_config()
        if config.paths.log_file:
            add_log_file(config.paths.log_file, config.paths.log_level)

        return commands[args.command](args, config)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except (IngestionError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())

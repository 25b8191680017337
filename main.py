#!/usr/bin/env python3
"""
EDI Codec Command Line Tool

Converts X12 EDI files to XML and XML files back to EDI.

Usage:
    python main.py input.edi                               # Convert input.edi -> input.xml
    python main.py input.edi output.xml                    # Convert to a specific output file
    python main.py input.xml                               # Convert input.xml -> input.edi
    python main.py input.edi --summary                     # Also list transaction sets
"""

import argparse
import logging
import sys
from pathlib import Path

from lxml import etree

# Try importing from installed package first, fallback to src path
try:
    from edi_errors import EdiFormatError
    from edi_options import EdiOptions
    from edi_parser import parse_edi
    from edi_writer import write_edi
    from edi_xml import parse_xml, to_xml_string
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from edi_errors import EdiFormatError
    from edi_options import EdiOptions
    from edi_parser import parse_edi
    from edi_writer import write_edi
    from edi_xml import parse_xml, to_xml_string

logger = logging.getLogger(__name__)


def print_summary(document) -> None:
    """Print the segment count and the transaction sets found in a document."""
    transaction_sets = document.transaction_sets
    print(f"\nDocument Summary:")
    print(f"  Segments: {len(document.segments)}")
    print(f"  Transaction Sets: {len(transaction_sets)}")
    for i, transaction_set in enumerate(transaction_sets):
        st = transaction_set.segments[0]
        isa13 = transaction_set.interchange_header.get_element(13) if transaction_set.interchange_header else None
        gs06 = transaction_set.group_header.get_element(6) if transaction_set.group_header else None
        print(
            f"  {i + 1}. ST {st.get_element(1)} #{st.get_element(2)}: "
            f"{len(transaction_set.segments)} segments (ISA13={isa13}, GS06={gs06})"
        )


def convert_file(input_file: str, output_file: str, target: str, options: EdiOptions, summary: bool = False) -> int:
    """Convert an EDI file to XML or an XML file to EDI."""

    print(f"EDI Codec - Processing {input_file}")
    print("=" * 50)

    try:
        if target == "xml":
            with open(input_file, 'r', newline='') as f:
                edi_content = f.read()
            print(f"Loaded {len(edi_content)} characters")
            document = parse_edi(edi_content, options)
            output = to_xml_string(document)
        else:
            with open(input_file, 'rb') as f:
                document = parse_xml(f.read())
            document.options = options
            output = write_edi(document)

        print(f"Parsed {len(document.segments)} segments")
        if summary:
            print_summary(document)

        with open(output_file, 'w', newline='') as f:
            f.write(output)

        print(f"\nOutput saved to: {output_file}")
        print(f"Output size: {len(output):,} characters")
        return 0

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1
    except EdiFormatError as e:
        print(f"Error: Invalid EDI framing: {e}")
        return 1
    except etree.XMLSyntaxError as e:
        print(f"Error: Invalid XML: {e}")
        return 1
    except ValueError as e:
        # e.g. a segment with no id cannot become an XML tag
        print(f"Error: Cannot convert document: {e}")
        return 1


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert X12 EDI files to XML and back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py claims.edi                         # claims.edi -> claims.xml
  python main.py claims.xml claims_out.edi          # XML back to EDI
  python main.py claims.edi --element-separator '|' # Explicit separator
        """
    )

    parser.add_argument('input_file', help='Input EDI or XML file')
    parser.add_argument('output_file', nargs='?',
                        help='Output file (default: input file with swapped suffix)')
    parser.add_argument('--to', choices=['xml', 'edi'], dest='target',
                        help='Conversion target (default: edi for .xml input, xml otherwise)')
    parser.add_argument('--segment-terminator', help='Segment terminator character')
    parser.add_argument('--element-separator', help='Element separator character')
    parser.add_argument('--component-separator', help='Component separator character')
    parser.add_argument('--repetition-separator', help='Repetition separator character')
    parser.add_argument('--summary', action='store_true', help='Print the transaction sets found')
    parser.add_argument('--log-level', default='WARNING', help='Logging level (default: WARNING)')
    return parser


def main(argv=None):
    """Main entry point with command line argument parsing."""

    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stderr,
    )

    input_path = Path(args.input_file)
    target = args.target or ('edi' if input_path.suffix.lower() == '.xml' else 'xml')
    if not args.output_file:
        args.output_file = str(input_path.with_suffix('.' + target))

    if not input_path.exists():
        print(f"Error: Input file not found: {args.input_file}")
        return 1

    try:
        options = EdiOptions(
            segment_terminator=args.segment_terminator,
            element_separator=args.element_separator,
            component_separator=args.component_separator,
            repetition_separator=args.repetition_separator,
        )
    except ValueError as e:
        print(f"Error: Invalid separator: {e}")
        return 1

    return convert_file(args.input_file, args.output_file, target, options, args.summary)


if __name__ == "__main__":
    sys.exit(main())

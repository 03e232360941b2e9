# examples/run_validation.py
import sys, os, json, argparse, logging

# Ensure src is importable when invoking from repo root
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(REPO_ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tealium_mcp.validate import validate_data_layer
from tealium_mcp.debug import debug_data_layer
from tealium_mcp.reporting import format_validation_result, format_debug_result, issues_frame, to_json


def run_validation(path: str, schema: str, strict: bool, out_json: str = None):
    """Validate one data layer file and print the Markdown report."""
    with open(path, "r", encoding="utf-8") as f:
        data_layer = json.load(f)

    result = validate_data_layer(data_layer, schema, strict)
    print(format_validation_result(result))

    if out_json:
        os.makedirs(os.path.dirname(out_json) or '.', exist_ok=True)
        with open(out_json, "w", encoding="utf-8") as f:
            f.write(to_json(result))
        print(f"Saved {out_json}")
    return result


def run_debug(path: str, checkpoints, out_csv: str = None):
    """Debug mode: severity-grouped report, optionally the issues as CSV."""
    with open(path, "r", encoding="utf-8") as f:
        data_layer = json.load(f)

    result = debug_data_layer(data_layer, checkpoints)
    print(format_debug_result(result))

    if out_csv:
        os.makedirs(os.path.dirname(out_csv) or '.', exist_ok=True)
        issues_frame(result).to_csv(out_csv, index=False)
        print(f"Saved {out_csv}")
    return result


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument("data_layer", help="Path to a JSON file holding the data layer (utag_data)")
    parser.add_argument("--schema", default="standard", help="standard, ecommerce or hotels")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    parser.add_argument("--debug", action="store_true", help="Run the debug report instead of validation")
    parser.add_argument(
        "--checkpoint",
        action="append",
        default=[],
        help="Debug checkpoint (ecommerce, loyalty, search); repeatable",
    )
    parser.add_argument("--out-json", help="Write the validation result as JSON")
    parser.add_argument("--out-csv", help="Write debug issues as CSV")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    if args.debug:
        run_debug(args.data_layer, args.checkpoint, args.out_csv)
    else:
        result = run_validation(args.data_layer, args.schema, args.strict, args.out_json)
        if not result.is_valid:
            sys.exit(1)

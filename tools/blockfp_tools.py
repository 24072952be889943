# (c) Jordi Cortadella, 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""blockfp command-line utility."""

import argparse
import importlib

# Modules that must be imported dynamically when invoking a tool.
# The keys are the tool names, and the values are the module paths.
# The main function of each module must be called "main" and must
# accept two parameters: prog (str) and args (list[str]).

TOOLS = {
    "place": "tools.place.place",
    "verify": "tools.verifier.verifier",
}


def main() -> None:
    """Main function."""
    parser = argparse.ArgumentParser(prog="blockfp")
    parser.add_argument(
        "tool", choices=TOOLS.keys(), nargs=argparse.REMAINDER, help="tool to execute"
    )
    args = parser.parse_args()

    if args.tool:
        tool_name, tool_args = args.tool[0], args.tool[1:]
        if tool_name in TOOLS:
            try:
                importlib.import_module(
                    TOOLS[tool_name]).main(f"blockfp {tool_name}", tool_args)
            except Exception as e:
                import traceback
                traceback.print_exc()
                print(f"Error ({tool_name}): {e}")
        else:
            print("Unknown blockfp tool:", tool_name)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

"""
Plantgen - L-system plant mesh pipeline

Demonstrates the full build:
1. Rule texts are parsed into a production table
2. The rewrite engine expands the axiom generation by generation
3. The branch interpreter turns the sequence into a tube mesh
4. The mesh is exported to OBJ and/or rendered as a preview image

Run:
  python main.py --preset bush --obj out/bush.obj --preview out/bush.png
  python main.py --config params.json --seed 3
"""

import argparse
import logging
import sys

from plantgen.config import BuildParams, load_params
from plantgen.export import write_obj
from plantgen.pipeline import generate
from plantgen.visualization import save_mesh_preview

PRESETS = {
    "default": BuildParams,
    "bush": BuildParams.bush,
    "weed": BuildParams.weed,
    "stochastic": BuildParams.stochastic,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="plantgen",
        description="Generate an L-system plant mesh.",
    )
    source = p.add_mutually_exclusive_group()
    source.add_argument("--config", help="JSON file with build parameters")
    source.add_argument(
        "--preset", choices=sorted(PRESETS), default="default", help="Named preset"
    )
    p.add_argument("--iterations", type=int, help="Override the iteration count")
    p.add_argument("--seed", type=int, help="Override the random seed")
    p.add_argument("--obj", help="Write the mesh as Wavefront OBJ")
    p.add_argument("--preview", help="Write a PNG preview of the mesh")
    p.add_argument(
        "--show-sequence", action="store_true", help="Print the final symbol sequence"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def resolve_params(args: argparse.Namespace) -> BuildParams:
    """Load the preset or config file and apply command-line overrides."""
    if args.config:
        params = load_params(args.config)
    else:
        params = PRESETS[args.preset]()

    overrides: dict[str, object] = {}
    if args.iterations is not None:
        overrides["iterations"] = args.iterations
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        params = BuildParams.model_validate({**params.model_dump(), **overrides})
    return params


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    params = resolve_params(args)

    print("\n" + "=" * 60)
    print("  PLANTGEN: L-System Plant Mesh Pipeline")
    print("=" * 60)
    print(f"  Axiom: {params.axiom}")
    for rule in params.rules:
        print(f"  Rule:  {rule}")
    print(f"  Iterations: {params.iterations}, seed: {params.seed}")

    result = generate(params)

    if args.show_sequence:
        print(f"\n{result.sequence_text}")

    result.print_summary()

    if not result.mesh.is_valid():
        print("Generated mesh failed validation", file=sys.stderr)
        return 1

    if args.obj:
        path = write_obj(result.mesh, args.obj)
        print(f"Saved to {path}")
    if args.preview:
        save_mesh_preview(result.mesh, args.preview, title=f"n = {params.iterations}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Plantgen - L-system plant mesh generator

Expands a stochastic Lindenmayer grammar into a symbol sequence and
interprets that sequence with a 3D turtle into a tapering, branched tube
mesh (positions, texture coordinates, triangle indices).

Modules:
    config: Build parameters and constants
    symbols: Symbols, sequences, production tables and rule parsing
    rewrite: Generation-by-generation rewrite engine
    turtle: Turtle orientation state and turn law
    mesh: Mesh buffers, ring and cap emission
    interpreter: Branch interpreter (sequence -> mesh)
    pipeline: Full builds and the host-side generator adapter
    export: OBJ and dictionary export
    visualization: Matplotlib mesh previews
"""

from plantgen.config import BuildParams, load_params
from plantgen.export import mesh_to_dict, write_obj
from plantgen.interpreter import BranchDepthError, BranchInterpreter
from plantgen.mesh import MeshBuilder, TriangleMesh, Vertex
from plantgen.pipeline import BuildResult, PlantGenerator, generate, rebuild
from plantgen.rewrite import RewriteEngine, expand
from plantgen.symbols import (
    ProductionTable,
    RuleError,
    Symbol,
    SymbolSequence,
    as_sequence,
    parse_rule,
)
from plantgen.turtle import OrientationState
from plantgen.visualization import plot_generation_growth, plot_mesh, save_mesh_preview

__all__ = [
    # Config
    "BuildParams",
    "load_params",
    # Grammar
    "ProductionTable",
    "RuleError",
    "Symbol",
    "SymbolSequence",
    "as_sequence",
    "parse_rule",
    "RewriteEngine",
    "expand",
    # Geometry
    "OrientationState",
    "Vertex",
    "MeshBuilder",
    "TriangleMesh",
    "BranchInterpreter",
    "BranchDepthError",
    # Builds
    "BuildResult",
    "PlantGenerator",
    "generate",
    "rebuild",
    # Export
    "mesh_to_dict",
    "write_obj",
    # Previews
    "plot_generation_growth",
    "plot_mesh",
    "save_mesh_preview",
]

"""
ink_wrapper
===========

Generate typed Python bindings from ink! smart contract metadata.

    from ink_wrapper import generate, load_metadata

    print(generate(load_metadata("flipper.json"), wasm_path="flipper.wasm"))

The generated module depends only on `ink_wrapper_types` at runtime.
"""

from .codegen import generate
from .errors import MetadataError
from .metadata import load_metadata, parse_metadata
from .version import __version__

__all__ = ["generate", "load_metadata", "parse_metadata", "MetadataError", "__version__"]

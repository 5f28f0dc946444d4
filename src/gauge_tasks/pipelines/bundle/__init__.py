# relative
from .models import *
from .module_graph import ModuleNotFound, find_specifiers, resolve_module_graph
from .pipeline import BundlePipeline, execute_stage, load_upstream_map
from .runtime import concatenate
from .source_map import (
    decode_mappings,
    decode_vlq,
    encode_mappings,
    encode_vlq,
    flatten_index_map,
)
from .toolchain import (
    BabelTransformer,
    Minifier,
    Transformer,
    UglifyMinifier,
    strip_source_mapping_url,
)

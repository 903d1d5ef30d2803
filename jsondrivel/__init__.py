import importlib

mod = "jsondrivel"
class LazyLoader:
    """
    Lazy loader for the jsondrivel functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "infer": (f"{mod}.schema_inference", "infer"),
    "infer_many": (f"{mod}.schema_inference", "infer_many"),
    "merge": (f"{mod}.schema_inference", "merge"),
    "EnumInference": (f"{mod}.enum_inference", "EnumInference"),
    "infer_enum": (f"{mod}.enum_inference", "infer_enum"),
    "produce": (f"{mod}.produce", "produce"),
    "classify_string": (f"{mod}.string_inference", "classify_string"),
    "classify_number": (f"{mod}.string_inference", "classify_number"),
    "JsonSchemaToDrivelConverter": (f"{mod}.jsonschematodrivel", "JsonSchemaToDrivelConverter"),
    "parse_json_schema": (f"{mod}.jsonschematodrivel", "parse_json_schema"),
    "convert_drivel_to_json_schema": (f"{mod}.driveltojsons", "convert_drivel_to_json_schema"),
    "describe": (f"{mod}.driveltotext", "describe"),
    "convert_json_to_description": (f"{mod}.jsontodrivel", "convert_json_to_description"),
    "convert_json_to_json_schema": (f"{mod}.jsontodrivel", "convert_json_to_json_schema"),
    "produce_from_json": (f"{mod}.jsontodrivel", "produce_from_json"),
    "produce_from_json_schema": (f"{mod}.jsontodrivel", "produce_from_json_schema"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)

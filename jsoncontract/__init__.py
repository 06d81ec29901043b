import importlib

mod = "jsoncontract"
class LazyLoader:
    """    
    Lazy loader for the jsoncontract functions to speed up startup time.    
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
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "validate_with_schema": (f"{mod}.validate", "validate_with_schema"),
    "validate_instance": (f"{mod}.validate", "validate_instance"),
    "validate_file": (f"{mod}.validate", "validate_file"),
    "add_schema": (f"{mod}.validate", "add_schema"),
    "load_schemas": (f"{mod}.validate", "load_schemas"),
    "ValidationResult": (f"{mod}.validate", "ValidationResult"),
    "ValidationFailed": (f"{mod}.errors", "ValidationFailed"),
    "DataInvalid": (f"{mod}.errors", "DataInvalid"),
    "SchemaInvalid": (f"{mod}.errors", "SchemaInvalid"),
    "SchemaStore": (f"{mod}.schemastore", "SchemaStore"),
    "is_equal": (f"{mod}.common", "is_equal"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)

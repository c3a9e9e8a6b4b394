"""
Source AST service for Python APIs.

Reads a decorator-annotated Python API with the standard `ast` module,
without importing or executing it. Python has no parameter decorators, so
argument markers are read from `typing.Annotated` metadata
(`id: Annotated[str, Param("id")]`) or from the default value
(`id: str = Param("id")`).

Annotations are rendered as TypeScript type texts. Names declared in, or
imported from, a file of the analyzed tree are rendered as
`import("/absolute/path/to/file").Name` qualifiers.
"""

from __future__ import annotations

import ast
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import SdkFormatError
from .nodes import ClassNode, DeclarationNode, DecoratorArg, DecoratorNode, MethodNode, ParamNode

logger = logging.getLogger(__name__)

IGNORED_DIRECTORIES = {"__pycache__", "node_modules", "venv", "site-packages"}

# Python type name -> TypeScript type
PRIMITIVE_TYPES = {
    "str": "string",
    "bytes": "string",
    "int": "number",
    "float": "number",
    "complex": "number",
    "bool": "boolean",
    "None": "null",
    "NoneType": "null",
    "Any": "any",
    "object": "any",
    "datetime": "string",
    "date": "string",
    "time": "string",
    "timedelta": "string",
    "UUID": "string",
    "Decimal": "string",
    "EmailStr": "string",
    "AnyUrl": "string",
    "HttpUrl": "string",
}

TS_PRIMITIVES = {"string", "number", "boolean", "null", "undefined", "void", "any", "unknown", "never", "bigint", "symbol"}

ARRAY_GENERICS = {
    "list",
    "List",
    "Sequence",
    "MutableSequence",
    "Iterable",
    "Iterator",
    "Collection",
    "set",
    "Set",
    "frozenset",
    "FrozenSet",
    "AbstractSet",
}
MAPPING_GENERICS = {"dict", "Dict", "Mapping", "MutableMapping", "DefaultDict", "defaultdict", "OrderedDict"}
TUPLE_GENERICS = {"tuple", "Tuple"}
PROMISE_GENERICS = {"Awaitable", "Coroutine"}
WRAPPER_GENERICS = {"Annotated", "Required", "NotRequired", "ReadOnly", "Final"}
ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"}

MAX_LOOKUP_DEPTH = 16


@dataclass
class _ImportTarget:
    """Where an imported name comes from."""

    file_path: Path
    name: str
    is_module: bool = False


@dataclass
class _ModuleInfo:
    """A parsed source file."""

    path: Path
    relative_path: str
    tree: ast.Module
    imports: dict[str, _ImportTarget] = field(default_factory=dict)
    declarations: dict[str, ast.stmt] = field(default_factory=dict)

    @property
    def qualifier_path(self) -> str:
        return self.path.with_suffix("").as_posix()


def _generic_name(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return ""


def _subscript_args(node: ast.Subscript) -> list[ast.expr]:
    if isinstance(node.slice, ast.Tuple):
        return list(node.slice.elts)
    return [node.slice]


def _is_ellipsis(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is Ellipsis


class PythonSourceAst:
    """Source AST service reading Python files."""

    def __init__(
        self,
        root: str | Path,
        type_overrides: dict[str, str] | None = None,
        search_paths: list[str | Path] | None = None,
    ):
        """
        Initialize the reader.

        Args:
            root: Path to the API's source directory
            type_overrides: Python type name -> TypeScript type, checked before anything else
            search_paths: Directories absolute imports are resolved from
                (defaults to the root and its parent)
        """
        self._root = Path(root).resolve()
        self.type_overrides = dict(type_overrides or {})
        if search_paths is None:
            self.search_paths = [self._root, self._root.parent]
        else:
            self.search_paths = [Path(p).resolve() for p in search_paths]
        self._modules: dict[Path, _ModuleInfo] = {}

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # SourceAstService interface
    # ------------------------------------------------------------------

    def list_files(self) -> list[str]:
        files = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRECTORIES and not d.startswith("."))
            for filename in sorted(filenames):
                if filename.endswith(".py"):
                    files.append(Path(dirpath, filename).relative_to(self._root).as_posix())
        return files

    def classes_in_file(self, file_path: str) -> list[ClassNode]:
        module = self._load(self._root / file_path)
        return [self._build_class(node, module) for node in module.tree.body if isinstance(node, ast.ClassDef)]

    def resolve_class(self, file_path: str, name: str) -> ClassNode | None:
        module = self._load(self._root / file_path)
        found = self._lookup(module, name)
        if found is None:
            return None
        target_module, node = found
        if not isinstance(node, ast.ClassDef):
            return None
        return self._build_class(node, target_module)

    def find_declaration(self, module_path: str, name: str) -> DeclarationNode | None:
        file_path = self._module_file(self._root / module_path)
        if file_path is None:
            return None
        found = self._lookup(self._load(file_path), name)
        if found is None:
            return None
        target_module, node = found
        return self._build_declaration(node, target_module)

    # ------------------------------------------------------------------
    # Modules and imports
    # ------------------------------------------------------------------

    def _module_file(self, base: Path) -> Path | None:
        """Find the file of a module path given without extension."""
        candidates = [base.parent / f"{base.name}.py", base / "__init__.py"]
        if base.suffix == ".py":
            candidates.insert(0, base)
        for candidate in candidates:
            if candidate.is_file():
                return candidate.resolve()
        return None

    def _load(self, path: Path) -> _ModuleInfo:
        path = path.resolve()
        module = self._modules.get(path)
        if module is not None:
            return module

        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SdkFormatError(f"Failed to read source file {path}: {e}") from e

        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise SdkFormatError(f"Failed to parse source file {path}: {e}") from e

        relative_path = Path(os.path.relpath(path, self._root)).as_posix()
        module = _ModuleInfo(path=path, relative_path=relative_path, tree=tree)
        self._modules[path] = module

        module.imports = self._collect_imports(tree, path)
        module.declarations = self._collect_declarations(tree)
        return module

    def _collect_imports(self, tree: ast.Module, path: Path) -> dict[str, _ImportTarget]:
        imports: dict[str, _ImportTarget] = {}

        for node in self._top_level_statements(tree.body):
            if isinstance(node, ast.ImportFrom):
                if node.level:
                    base = path.parent
                    for _ in range(node.level - 1):
                        base = base.parent
                    candidates = [base / node.module.replace(".", "/")] if node.module else [base]
                elif node.module:
                    candidates = [p / node.module.replace(".", "/") for p in self.search_paths]
                else:
                    continue

                for alias in node.names:
                    target = self._resolve_import(candidates, alias.name)
                    if target is not None:
                        imports[alias.asname or alias.name] = target

            elif isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname is None and "." in alias.name:
                        continue
                    for search_path in self.search_paths:
                        module_file = self._module_file(search_path / alias.name.replace(".", "/"))
                        if module_file is not None:
                            imports[alias.asname or alias.name] = _ImportTarget(module_file, "", is_module=True)
                            break

        return imports

    def _resolve_import(self, candidates: list[Path], name: str) -> _ImportTarget | None:
        for candidate in candidates:
            submodule = self._module_file(candidate / name)
            if submodule is not None:
                return _ImportTarget(submodule, name, is_module=True)
            module_file = self._module_file(candidate)
            if module_file is not None:
                return _ImportTarget(module_file, name)
        return None

    def _top_level_statements(self, body: list[ast.stmt]):
        """Top-level statements, including the ones under `if TYPE_CHECKING:`."""
        for node in body:
            if isinstance(node, ast.If):
                yield from self._top_level_statements(node.body)
            else:
                yield node

    def _collect_declarations(self, tree: ast.Module) -> dict[str, ast.stmt]:
        declarations: dict[str, ast.stmt] = {}

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                declarations[node.name] = node
            elif hasattr(ast, "TypeAlias") and isinstance(node, ast.TypeAlias):
                declarations[node.name.id] = node
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                if node.value is not None and _generic_name(node.annotation) == "TypeAlias":
                    declarations[node.target.id] = node
            elif isinstance(node, ast.Assign) and len(node.targets) == 1 and isinstance(node.targets[0], ast.Name):
                value = node.value
                is_type = isinstance(value, ast.Subscript) or (isinstance(value, ast.BinOp) and isinstance(value.op, ast.BitOr))
                if isinstance(value, ast.Call) and _generic_name(value.func) == "NewType":
                    is_type = True
                if is_type:
                    declarations[node.targets[0].id] = node

        return declarations

    def _lookup(self, module: _ModuleInfo, name: str, depth: int = 0) -> tuple[_ModuleInfo, ast.stmt] | None:
        """Find the declaration a name refers to, following imports."""
        node = module.declarations.get(name)
        if node is not None:
            return module, node

        target = module.imports.get(name)
        if target is None or target.is_module or depth >= MAX_LOOKUP_DEPTH:
            return None

        return self._lookup(self._load(target.file_path), target.name, depth + 1)

    @staticmethod
    def _declaration_name(node: ast.stmt) -> str:
        if isinstance(node, ast.ClassDef):
            return node.name
        if isinstance(node, ast.Assign):
            return node.targets[0].id
        if isinstance(node, ast.AnnAssign):
            return node.target.id
        return node.name.id

    # ------------------------------------------------------------------
    # Type rendering
    # ------------------------------------------------------------------

    def render_annotation(self, node: ast.expr | None, module: _ModuleInfo) -> str:
        """Render a Python annotation as a TypeScript type text."""
        if node is None:
            return "any"

        if isinstance(node, ast.Constant):
            if node.value is None:
                return "null"
            if isinstance(node.value, str):
                # Forward reference
                try:
                    parsed = ast.parse(node.value, mode="eval").body
                except SyntaxError:
                    return "any"
                return self.render_annotation(parsed, module)
            return "any"

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._union([self.render_annotation(node.left, module), self.render_annotation(node.right, module)])

        if isinstance(node, ast.Name):
            return self._render_name(node.id, module)

        if isinstance(node, ast.Attribute):
            if isinstance(node.value, ast.Name):
                target = module.imports.get(node.value.id)
                if target is not None and target.is_module:
                    return self._render_name(node.attr, self._load(target.file_path))
            return self._render_name(node.attr, module)

        if isinstance(node, ast.Subscript):
            return self._render_subscript(node, module)

        return "any"

    def _render_name(self, name: str, module: _ModuleInfo) -> str:
        if name in self.type_overrides:
            return self.type_overrides[name]

        found = self._lookup(module, name)
        if found is not None:
            target_module, node = found
            return f'import("{target_module.qualifier_path}").{self._declaration_name(node)}'

        if name in PRIMITIVE_TYPES:
            return PRIMITIVE_TYPES[name]
        if name in ARRAY_GENERICS or name in TUPLE_GENERICS:
            return "any[]"
        if name in MAPPING_GENERICS:
            return "Record<string, any>"

        return name

    def _render_subscript(self, node: ast.Subscript, module: _ModuleInfo) -> str:
        base_name = _generic_name(node.value)
        args = _subscript_args(node)

        if base_name in WRAPPER_GENERICS:
            return self.render_annotation(args[0], module)

        if base_name == "Optional":
            return self._union([self.render_annotation(args[0], module), "null"])

        if base_name == "Union":
            return self._union([self.render_annotation(arg, module) for arg in args])

        if base_name == "Literal":
            return self._union([self._render_literal(arg, module) for arg in args])

        if base_name in ARRAY_GENERICS:
            return self._array(self.render_annotation(args[0], module))

        if base_name in TUPLE_GENERICS:
            if len(args) == 2 and _is_ellipsis(args[1]):
                return self._array(self.render_annotation(args[0], module))
            if len(args) == 1 and isinstance(args[0], ast.Tuple) and not args[0].elts:
                return "[]"
            return "[" + ", ".join(self.render_annotation(arg, module) for arg in args) + "]"

        if base_name in MAPPING_GENERICS:
            key = self.render_annotation(args[0], module) if args else "string"
            value = self.render_annotation(args[1], module) if len(args) > 1 else "any"
            if key not in ("string", "number"):
                key = "string"
            return f"Record<{key}, {value}>"

        if base_name in PROMISE_GENERICS:
            return f"Promise<{self.render_annotation(args[-1], module)}>"

        if base_name in ("type", "Type", "Callable"):
            return "any"

        base = self.render_annotation(node.value, module)
        return f"{base}<{', '.join(self.render_annotation(arg, module) for arg in args)}>"

    def _render_literal(self, node: ast.expr, module: _ModuleInfo) -> str:
        if isinstance(node, ast.Constant):
            if node.value is None:
                return "null"
            if isinstance(node.value, bool):
                return "true" if node.value else "false"
            if isinstance(node.value, (str, int, float)):
                return json.dumps(node.value)
        if isinstance(node, ast.Attribute):
            # Enum member
            return f"{self.render_annotation(node.value, module)}.{node.attr}"
        return "any"

    @staticmethod
    def _union(parts: list[str]) -> str:
        if "any" in parts:
            return "any"
        unique: list[str] = []
        for part in parts:
            if part not in unique:
                unique.append(part)
        return " | ".join(unique)

    @staticmethod
    def _array(inner: str) -> str:
        if " | " in inner or " & " in inner:
            return f"({inner})[]"
        return f"{inner}[]"

    def _type_shape(self, node: ast.expr | None, module: _ModuleInfo, depth: int = 0) -> tuple[bool, tuple[str, ...]]:
        """Tell whether an annotation is an object type, and list its properties."""
        if node is None or depth >= MAX_LOOKUP_DEPTH:
            return False, ()

        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            try:
                node = ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return False, ()

        if isinstance(node, ast.Subscript):
            base_name = _generic_name(node.value)
            if base_name in WRAPPER_GENERICS:
                return self._type_shape(_subscript_args(node)[0], module, depth + 1)
            if base_name in ARRAY_GENERICS or base_name in MAPPING_GENERICS or base_name in TUPLE_GENERICS:
                return True, ()
            if base_name in ("Optional", "Union", "Literal"):
                return False, ()
            return self._type_shape(node.value, module, depth + 1)

        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
            target = module.imports.get(node.value.id)
            if target is not None and target.is_module:
                return self._name_shape(node.attr, self._load(target.file_path), depth)
            return self._name_shape(node.attr, module, depth)

        if isinstance(node, ast.Name):
            return self._name_shape(node.id, module, depth)

        return False, ()

    def _name_shape(self, name: str, module: _ModuleInfo, depth: int) -> tuple[bool, tuple[str, ...]]:
        if name in self.type_overrides:
            return self.type_overrides[name] not in TS_PRIMITIVES, ()

        found = self._lookup(module, name)
        if found is not None:
            target_module, node = found
            if isinstance(node, ast.ClassDef):
                if self._is_enum(node):
                    return False, ()
                return True, tuple(field_name for field_name, *_ in self._class_fields(node, target_module))
            return self._type_shape(self._alias_value(node), target_module, depth + 1)

        if name in PRIMITIVE_TYPES:
            return False, ()

        # Containers and names declared outside of the analyzed tree
        return True, ()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    @staticmethod
    def _is_enum(node: ast.ClassDef) -> bool:
        return any(_generic_name(base) in ENUM_BASES for base in node.bases)

    @staticmethod
    def _alias_value(node: ast.stmt) -> ast.expr | None:
        value = node.value
        if isinstance(value, ast.Call) and _generic_name(value.func) == "NewType" and len(value.args) > 1:
            return value.args[1]
        return value

    def _class_fields(
        self, node: ast.ClassDef, module: _ModuleInfo, depth: int = 0
    ) -> list[tuple[str, ast.expr, bool, _ModuleInfo]]:
        """List (name, annotation, has_default, module) of a class's fields, inherited ones first."""
        fields: dict[str, tuple[str, ast.expr, bool, _ModuleInfo]] = {}

        if depth < MAX_LOOKUP_DEPTH:
            for base in node.bases:
                base_expr = base.value if isinstance(base, ast.Subscript) else base
                found = self._lookup(module, _generic_name(base_expr)) if isinstance(base_expr, ast.Name) else None
                if found is not None and isinstance(found[1], ast.ClassDef):
                    for entry in self._class_fields(found[1], found[0], depth + 1):
                        fields[entry[0]] = entry

        for stmt in node.body:
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            name = stmt.target.id
            if name.startswith("_"):
                continue
            annotation = stmt.annotation
            if isinstance(annotation, ast.Subscript) and _generic_name(annotation.value) == "ClassVar":
                continue
            if _generic_name(annotation) == "ClassVar":
                continue
            fields[name] = (name, annotation, stmt.value is not None, module)

        return list(fields.values())

    def _type_params(self, node: ast.ClassDef) -> tuple[str, ...]:
        params = [param.name for param in getattr(node, "type_params", []) if hasattr(param, "name")]
        for base in node.bases:
            if isinstance(base, ast.Subscript) and _generic_name(base.value) == "Generic":
                params.extend(_generic_name(arg) for arg in _subscript_args(base))
        return tuple(params)

    def _build_declaration(self, node: ast.stmt, module: _ModuleInfo) -> DeclarationNode:
        name = self._declaration_name(node)

        if isinstance(node, ast.ClassDef) and self._is_enum(node):
            members = []
            for stmt in node.body:
                if not isinstance(stmt, ast.Assign) or not isinstance(stmt.targets[0], ast.Name):
                    continue
                member = stmt.targets[0].id
                value = stmt.value
                if isinstance(value, ast.Constant) and isinstance(value.value, (str, int, float)) and not isinstance(value.value, bool):
                    members.append(f"  {member} = {json.dumps(value.value)},")
                else:
                    # auto() and computed values
                    members.append(f"  {member} = {json.dumps(member.lower())},")
            body = "{\n" + "\n".join(members) + "\n}" if members else "{}"
            return DeclarationNode(name=name, kind="enum", body_text=body, file_path=module.relative_path)

        if isinstance(node, ast.ClassDef):
            lines = []
            for field_name, annotation, has_default, field_module in self._class_fields(node, module):
                optional = "?" if has_default else ""
                lines.append(f"  {field_name}{optional}: {self.render_annotation(annotation, field_module)};")
            body = "{\n" + "\n".join(lines) + "\n}" if lines else "{}"
            return DeclarationNode(
                name=name,
                kind="interface",
                body_text=body,
                file_path=module.relative_path,
                type_params=self._type_params(node),
            )

        type_params = tuple(param.name for param in getattr(node, "type_params", []) if hasattr(param, "name"))
        return DeclarationNode(
            name=name,
            kind="alias",
            body_text=self.render_annotation(self._alias_value(node), module),
            file_path=module.relative_path,
            type_params=type_params,
        )

    # ------------------------------------------------------------------
    # Classes, methods, decorators
    # ------------------------------------------------------------------

    def _build_class(self, node: ast.ClassDef, module: _ModuleInfo) -> ClassNode:
        methods = tuple(
            self._build_method(stmt, module) for stmt in node.body if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
        )
        return ClassNode(
            name=node.name,
            decorators=tuple(self._build_decorator(dec) for dec in node.decorator_list),
            methods=methods,
            file_path=module.relative_path,
        )

    def _build_method(self, node: ast.FunctionDef | ast.AsyncFunctionDef, module: _ModuleInfo) -> MethodNode:
        args = node.args
        positional = args.posonlyargs + args.args
        defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)
        entries = list(zip(positional, defaults)) + list(zip(args.kwonlyargs, args.kw_defaults))

        params = []
        for index, (arg, default) in enumerate(entries):
            if index == 0 and arg.arg in ("self", "cls"):
                continue
            params.append(self._build_param(arg, default, module))

        if node.returns is None:
            return_type = "any"
        elif isinstance(node.returns, ast.Constant) and node.returns.value is None:
            return_type = "void"
        else:
            return_type = self.render_annotation(node.returns, module)

        if isinstance(node, ast.AsyncFunctionDef) and not return_type.startswith("Promise<"):
            return_type = f"Promise<{return_type}>"

        return MethodNode(
            name=node.name,
            decorators=tuple(self._build_decorator(dec) for dec in node.decorator_list),
            params=tuple(params),
            return_type_text=return_type,
        )

    def _build_param(self, arg: ast.arg, default: ast.expr | None, module: _ModuleInfo) -> ParamNode:
        markers = []
        annotation = arg.annotation

        if isinstance(annotation, ast.Subscript) and _generic_name(annotation.value) == "Annotated":
            for metadata in _subscript_args(annotation)[1:]:
                if isinstance(metadata, (ast.Call, ast.Name, ast.Attribute)):
                    markers.append(self._build_decorator(metadata))

        if isinstance(default, (ast.Call, ast.Name, ast.Attribute)):
            markers.append(self._build_decorator(default))

        is_object, properties = self._type_shape(annotation, module)

        return ParamNode(
            name=arg.arg,
            decorators=tuple(markers),
            type_text=self.render_annotation(annotation, module),
            is_object=is_object,
            properties=properties,
            text=ast.unparse(arg),
        )

    def _build_decorator(self, node: ast.expr) -> DecoratorNode:
        text = ast.unparse(node)

        if isinstance(node, ast.Call):
            return DecoratorNode(
                name=_generic_name(node.func),
                is_called=True,
                args=tuple(self._build_decorator_arg(arg) for arg in node.args),
                kwargs={kw.arg: self._build_decorator_arg(kw.value) for kw in node.keywords if kw.arg},
                text=text,
            )

        return DecoratorNode(name=_generic_name(node), is_called=False, text=text)

    @staticmethod
    def _build_decorator_arg(node: ast.expr) -> DecoratorArg:
        text = ast.unparse(node)

        if isinstance(node, ast.Constant):
            return DecoratorArg(text=text, is_literal=True, value=node.value)

        if isinstance(node, (ast.Name, ast.Attribute)):
            return DecoratorArg(text=text, names=(_generic_name(node),))

        if isinstance(node, (ast.List, ast.Tuple)):
            names = tuple(_generic_name(elt) for elt in node.elts if isinstance(elt, (ast.Name, ast.Attribute)))
            return DecoratorArg(text=text, names=names)

        return DecoratorArg(text=text)

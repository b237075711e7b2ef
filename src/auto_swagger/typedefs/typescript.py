"""TypeScript declaration reader.

Converts the declarations of a ``.d.ts``/``.ts`` file (interfaces, type
aliases and enums) into JSON Schemas, and wraps them in an OpenAPI-style
document under ``components.schemas``. References between declared types
point at ``#/components/schemas/<Name>``.

Anything that is not a declaration (imports, functions, classes) is skipped.
"""

import json
import re
from typing import NamedTuple

from auto_swagger.errors import TypeDefinitionError

COMPONENTS_PREFIX = "#/components/schemas/"

TOKEN_RE = re.compile(
    r"""
    (?P<doc>/\*\*(?!/).*?\*/)
  | (?P<comment>//[^\n]*|/\*.*?\*/)
  | (?P<space>\s+)
  | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'|`(?:[^`\\]|\\.)*`)
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<ident>[A-Za-z_$][\w$]*)
  | (?P<punct>=>|\.\.\.|[{}\[\]()<>;,:?|&=.*!+\-/@#%^~])
    """,
    re.VERBOSE | re.DOTALL,
)

PRIMITIVES = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "bigint": {"type": "integer"},
    "boolean": {"type": "boolean"},
    "null": {"type": "null"},
    "object": {"type": "object"},
    "any": {},
    "unknown": {},
    "Date": {"type": "string", "format": "date-time"},
}

# Types that carry no value; dropped from unions
EMPTY_TYPES = {"undefined", "void", "never"}

# Generic helpers rendered as their first type argument
PASSTHROUGH_GENERICS = {"Partial", "Required", "Readonly", "NonNullable", "Pick", "Omit", "Promise"}

ARRAY_GENERICS = {"Array", "ReadonlyArray", "Set"}

DECLARATION_KEYWORDS = {"export", "declare", "interface", "type", "enum"}


class Token(NamedTuple):
    kind: str
    value: str
    line: int
    doc: str | None = None


def tokenize(text: str) -> list[Token]:
    tokens = []
    line = 1
    pos = 0
    doc = None
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if not match:
            raise TypeDefinitionError(f"unexpected character {text[pos]!r}", line)

        kind = match.lastgroup
        value = match.group()
        if kind == "doc":
            doc = _clean_doc(value)
        elif kind not in ("comment", "space"):
            tokens.append(Token(kind, value, line, doc))
            doc = None

        line += value.count("\n")
        pos = match.end()

    tokens.append(Token("eof", "", line))
    return tokens


def _clean_doc(comment: str) -> str | None:
    lines = []
    for raw in comment[3:-2].splitlines():
        stripped = raw.strip().lstrip("*").strip()
        if stripped.startswith("@"):
            continue
        if stripped:
            lines.append(stripped)
    return " ".join(lines) or None


def _unquote(literal: str) -> str:
    return re.sub(r"\\(.)", r"\1", literal[1:-1])


def _ref(name: str) -> dict:
    return {"$ref": f"{COMPONENTS_PREFIX}{name}"}


def _with_description(schema: dict, doc: str | None) -> dict:
    if not doc:
        return schema
    if "$ref" in schema:
        # siblings of $ref are ignored by most tools
        return {"allOf": [schema], "description": doc}
    return {**schema, "description": doc}


class _Empty:
    """Marker for ``undefined``/``void``/``never``."""


EMPTY = _Empty()


class TypeScriptReader:
    """Recursive-descent reader over the tokens of one source file."""

    def __init__(self, text: str):
        self.tokens = tokenize(text)
        self.pos = 0
        self.type_params: set[str] = set()

    # -- token helpers -------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind == "eof":
            raise TypeDefinitionError("unexpected end of input", token.line)
        self.pos += 1
        return token

    def at(self, value: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.kind in ("punct", "ident") and token.value == value

    def accept(self, value: str) -> bool:
        if self.at(value):
            self.pos += 1
            return True
        return False

    def expect(self, value: str) -> Token:
        token = self.peek()
        if not self.at(value):
            raise TypeDefinitionError(f"expected {value!r}, found {token.value or 'end of input'!r}", token.line)
        return self.advance()

    def expect_ident(self) -> str:
        token = self.peek()
        if token.kind != "ident":
            raise TypeDefinitionError(f"expected identifier, found {token.value!r}", token.line)
        return self.advance().value

    def skip_balanced(self) -> None:
        """Skip one bracketed group starting at the current token."""
        opener = self.advance().value
        # angle brackets only nest with each other; inside other groups they may be operators
        pairs = {"<": ">"} if opener == "<" else {"(": ")", "[": "]", "{": "}"}
        stack = [pairs[opener]]
        while stack:
            token = self.advance()
            if token.kind != "punct":
                continue
            if token.value in pairs:
                stack.append(pairs[token.value])
            elif token.value == stack[-1]:
                stack.pop()

    # -- declarations --------------------------------------------------

    def read(self) -> dict[str, dict]:
        """Read every declaration in the file into a name -> schema map."""
        schemas = {}
        while self.peek().kind != "eof":
            doc = self.peek().doc
            while self.at("export") or self.at("declare") or self.at("default"):
                self.advance()

            if self.at("interface"):
                name, schema = self.read_interface(doc)
            elif self.at("type") and self.peek(1).kind == "ident":
                name, schema = self.read_alias(doc)
            elif self.at("enum") or (self.at("const") and self.at("enum", 1)):
                name, schema = self.read_enum(doc)
            else:
                self.skip_statement()
                continue
            schemas[name] = schema
        return schemas

    def skip_statement(self) -> None:
        first = True
        while self.peek().kind != "eof":
            token = self.peek()
            if not first and token.kind == "ident" and token.value in DECLARATION_KEYWORDS:
                return
            first = False
            if token.kind == "punct" and token.value in "({[":
                self.skip_balanced()
                if token.value == "{":
                    self.accept(";")
                    return
                continue
            self.advance()
            if token.kind == "punct" and token.value == ";":
                return

    def read_type_params(self) -> set[str]:
        names = set()
        if not self.accept("<"):
            return names
        while not self.accept(">"):
            names.add(self.expect_ident())
            if self.accept("extends"):
                self.read_type()
            if self.accept("="):
                self.read_type()
            self.accept(",")
        return names

    def read_interface(self, doc: str | None) -> tuple[str, dict]:
        self.expect("interface")
        name = self.expect_ident()
        self.type_params = self.read_type_params()

        bases = []
        if self.accept("extends"):
            bases.append(self.read_postfix())
            while self.accept(","):
                bases.append(self.read_postfix())

        body = self.read_object()
        self.type_params = set()

        schema = {"title": name}
        if doc:
            schema["description"] = doc
        if bases:
            schema["allOf"] = [*bases, body]
        else:
            schema.update(body)
        return name, schema

    def read_alias(self, doc: str | None) -> tuple[str, dict]:
        self.expect("type")
        name = self.expect_ident()
        self.type_params = self.read_type_params()
        self.expect("=")
        schema = self.read_schema()
        self.type_params = set()
        self.accept(";")

        if "$ref" in schema:
            schema = {"allOf": [schema]}
        schema = {"title": name, **_with_description(schema, doc)}
        return name, schema

    def read_enum(self, doc: str | None) -> tuple[str, dict]:
        self.accept("const")
        self.expect("enum")
        name = self.expect_ident()
        self.expect("{")

        values = []
        next_number = 0
        while not self.accept("}"):
            self.advance()  # member name
            if self.accept("="):
                token = self.advance()
                if token.kind == "string":
                    values.append(_unquote(token.value))
                elif token.kind == "number":
                    number = _number(token.value)
                    values.append(number)
                    next_number = number + 1
                else:
                    raise TypeDefinitionError(f"unsupported enum initializer {token.value!r}", token.line)
            else:
                values.append(next_number)
                next_number += 1
            self.accept(",")

        schema = {"title": name}
        if doc:
            schema["description"] = doc
        kinds = {type(value) for value in values}
        if kinds == {str}:
            schema["type"] = "string"
        elif kinds and kinds <= {int, float}:
            schema["type"] = "number"
        schema["enum"] = values
        return name, schema

    # -- object types --------------------------------------------------

    def read_object(self) -> dict:
        self.expect("{")
        properties = {}
        required = []
        additional = False

        while not self.accept("}"):
            if self.accept(";") or self.accept(","):
                continue

            doc = self.peek().doc
            if self.at("readonly") and not (self.at(":", 1) or self.at("?", 1)):
                self.advance()

            if self.at("["):
                additional = self.read_index_signature()
                continue

            token = self.advance()
            if token.kind not in ("ident", "string", "number"):
                raise TypeDefinitionError(f"unexpected {token.value!r} in object type", token.line)
            name = _unquote(token.value) if token.kind == "string" else token.value

            optional = self.accept("?")
            if self.at("(") or self.at("<"):
                # method signature
                if self.at("<"):
                    self.skip_balanced()
                self.skip_balanced()
                if self.accept(":"):
                    self.read_type()
                continue

            schema = {}
            if self.accept(":"):
                schema = self.read_type()
            if schema is EMPTY:
                optional = True
                schema = {}
            elif isinstance(schema, tuple):
                # union that included undefined
                schema, optional = schema[0], True

            properties[name] = _with_description(schema, doc)
            if not optional:
                required.append(name)

        result = {"type": "object", "properties": properties}
        if required:
            result["required"] = required
        result["additionalProperties"] = additional
        return result

    def read_index_signature(self) -> dict:
        self.expect("[")
        self.expect_ident()
        if self.accept("in"):
            self.read_type()
        else:
            self.expect(":")
            self.read_type()
        self.expect("]")
        self.accept("?")
        self.expect(":")
        return self.read_schema()

    # -- type expressions ----------------------------------------------

    def read_schema(self) -> dict:
        """Read a type expression as a plain schema."""
        schema = self.read_type()
        if schema is EMPTY:
            return {}
        if isinstance(schema, tuple):
            return schema[0]
        return schema

    def read_type(self):
        """Read a union type.

        Returns a schema, EMPTY for a type carrying no value, or a
        ``(schema, True)`` tuple for a union that also admits undefined.
        """
        self.accept("|")
        members = [self.read_intersection()]
        while self.accept("|"):
            members.append(self.read_intersection())

        values = [member for member in members if member is not EMPTY]
        had_empty = len(values) < len(members)
        if not values:
            return EMPTY

        schema = _union(values)
        return (schema, True) if had_empty else schema

    def read_intersection(self):
        self.accept("&")
        parts = [self.read_postfix()]
        while self.accept("&"):
            parts.append(self.read_postfix())
        if len(parts) == 1:
            return parts[0]
        return {"allOf": [part for part in parts if part is not EMPTY]}

    def read_postfix(self):
        schema = self.read_primary()
        while self.at("["):
            if self.at("]", 1):
                self.advance()
                self.advance()
                schema = {"type": "array", "items": {} if schema is EMPTY else schema}
            else:
                # indexed access type, e.g. Foo["bar"]
                self.skip_balanced()
                schema = {}
        return schema

    def read_primary(self):
        token = self.peek()

        if self.at("("):
            if self._is_function_type():
                self.skip_balanced()
                self.expect("=>")
                self.read_type()
                return {}
            self.advance()
            schema = self.read_schema()
            self.expect(")")
            return schema
        if self.at("{"):
            return self.read_object()
        if self.at("["):
            return self.read_tuple()

        if token.kind == "string":
            self.advance()
            return {"type": "string", "enum": [_unquote(token.value)]}
        if token.kind == "number":
            self.advance()
            return {"type": "number", "enum": [_number(token.value)]}
        if token.kind != "ident":
            raise TypeDefinitionError(f"unexpected {token.value or 'end of input'!r} in type", token.line)

        if token.value in ("true", "false"):
            self.advance()
            return {"type": "boolean", "enum": [token.value == "true"]}
        if token.value in EMPTY_TYPES:
            self.advance()
            return EMPTY
        if token.value == "keyof":
            self.advance()
            self.read_postfix()
            return {"type": "string"}
        if token.value == "typeof":
            self.advance()
            self._read_name()
            return {}
        if token.value in ("readonly", "unique"):
            self.advance()
            return self.read_postfix()

        return self.read_reference()

    def read_tuple(self) -> dict:
        self.expect("[")
        items = []
        while not self.accept("]"):
            self.accept("...")
            if self.peek().kind == "ident" and (self.at(":", 1) or (self.at("?", 1) and self.at(":", 2))):
                # labelled tuple member
                self.advance()
                self.accept("?")
                self.expect(":")
            items.append(self.read_schema())
            self.accept("?")
            self.accept(",")

        schema = {"type": "array", "minItems": len(items), "maxItems": len(items)}
        if items:
            schema["items"] = _union(items)
        return schema

    def read_reference(self) -> dict:
        name = self._read_name()
        args = []
        if self.at("<"):
            self.advance()
            while not self.accept(">"):
                args.append(self.read_schema())
                self.accept(",")

        if name in self.type_params:
            return {}
        if name in PRIMITIVES:
            return dict(PRIMITIVES[name])
        if name in ARRAY_GENERICS:
            return {"type": "array", "items": args[0] if args else {}}
        if name == "Record":
            value = args[1] if len(args) > 1 else {}
            return {"type": "object", "additionalProperties": value}
        if name in PASSTHROUGH_GENERICS:
            return args[0] if args else {}
        return _ref(name)

    def _read_name(self) -> str:
        name = self.expect_ident()
        while self.accept("."):
            name = self.expect_ident()
        return name

    def _is_function_type(self) -> bool:
        depth = 0
        offset = 0
        while True:
            token = self.peek(offset)
            if token.kind == "eof":
                return False
            if token.kind == "punct" and token.value == "(":
                depth += 1
            elif token.kind == "punct" and token.value == ")":
                depth -= 1
                if depth == 0:
                    return self.at("=>", offset + 1)
            offset += 1


def _number(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def _union(members: list[dict]) -> dict:
    unique = []
    for member in members:
        if member not in unique:
            unique.append(member)
    members = unique
    if len(members) == 1:
        return members[0]

    literal_types = {m.get("type") for m in members if set(m) == {"type", "enum"}}
    if len(literal_types) == 1 and all(set(m) == {"type", "enum"} for m in members):
        values = []
        for member in members:
            values.extend(v for v in member["enum"] if v not in values)
        return {"type": literal_types.pop(), "enum": values}

    return {"anyOf": members}


def read_type_definitions(text: str) -> dict[str, dict]:
    """Read every interface, type alias and enum in ``text`` into schemas."""
    return TypeScriptReader(text).read()


def convert_typescript(text: str, title: str = "auto-swagger", version: str = "v1") -> str:
    """Convert TypeScript declarations into an OpenAPI JSON document string."""
    document = {
        "openapi": "3.0.0",
        "info": {"title": title, "version": version},
        "paths": {},
        "components": {"schemas": read_type_definitions(text)},
    }
    return json.dumps(document, indent=2)

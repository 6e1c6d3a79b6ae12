import pytest
from structlog.testing import capture_logs

from analyzer import (
    ExportAnalysisError,
    SymbolKind,
    SymbolNode,
    SymbolResolver,
    create_global_root,
    find_exported_node,
    find_node,
    is_exported,
    parse,
)


def ident(name):
    return {"type": "Identifier", "name": name}


def member(obj, prop, computed=False):
    return {"type": "MemberExpression", "object": obj, "property": prop, "computed": computed}


def literal(value):
    return {"type": "Literal", "value": value}


def function(name=None):
    return {"type": "FunctionExpression", "id": ident(name) if name else None}


def assign(left, right):
    return {"type": "AssignmentExpression", "operator": "=", "left": left, "right": right}


def statement(expression):
    return {"type": "ExpressionStatement", "expression": expression}


def var(kind, name, init=None):
    return {
        "type": "VariableDeclaration",
        "kind": kind,
        "declarations": [{"type": "VariableDeclarator", "id": ident(name), "init": init}],
    }


def program(*body):
    return {"type": "Program", "sourceType": "module", "body": list(body)}


class RecordingLogger:
    def __init__(self):
        self.events = []

    def debug(self, event, **kw):
        self.events.append((event, kw))


def test_global_root_aliases():
    root = create_global_root()
    assert root.props["window"] is root
    assert root.props["exports"] is root.props["module"].props["exports"]

    bare = create_global_root(module_exports=False, window=False)
    assert bare.props == {}


def test_simple_identifier_becomes_literal_key():
    resolver = SymbolResolver(create_global_root())
    symbol = resolver.resolve(ident("name"), simple_identifier=True)
    assert symbol.kind is SymbolKind.LITERAL
    assert symbol.literal_key() == "name"


def test_identifier_prefers_scope_over_globals():
    root = create_global_root()
    root.props["x"] = SymbolNode()
    scope = SymbolNode()
    scope.props["x"] = SymbolNode(kind=SymbolKind.OBJECT)

    resolver = SymbolResolver(root)
    assert resolver.resolve(ident("x"), scope) is scope.props["x"]
    assert resolver.resolve(ident("x")) is root.props["x"]
    assert resolver.resolve(ident("missing")) is None


def test_function_like_nodes_carry_prototype():
    resolver = SymbolResolver(create_global_root())
    for node_type in (
        "ClassDeclaration",
        "FunctionDeclaration",
        "FunctionExpression",
        "ArrowFunctionExpression",
    ):
        node = {"type": node_type, "id": None}
        symbol = resolver.resolve(node)
        assert symbol.value is node
        assert symbol.is_object
        assert set(symbol.props) == {"prototype"}


def test_class_body_maps_methods():
    start = function()
    computed = function()
    body = {
        "type": "ClassBody",
        "body": [
            {"type": "MethodDefinition", "key": ident("start"), "value": start, "computed": False},
            {"type": "MethodDefinition", "key": ident("dyn"), "value": computed, "computed": True},
        ],
    }
    symbol = SymbolResolver(create_global_root()).resolve(body)
    assert symbol.value is body
    assert set(symbol.props) == {"start"}
    assert symbol.props["start"].value is start


def test_object_expression_skips_computed_and_unresolved():
    fn = function()
    node = {
        "type": "ObjectExpression",
        "properties": [
            {"type": "Property", "key": ident("fn"), "value": fn, "computed": False},
            {"type": "Property", "key": literal("quoted"), "value": literal(1), "computed": False},
            {"type": "Property", "key": ident("k"), "value": literal(2), "computed": True},
            {"type": "Property", "key": ident("gone"), "value": ident("nowhere"), "computed": False},
            {"type": "SpreadElement", "argument": ident("rest")},
        ],
    }
    symbol = SymbolResolver(create_global_root()).resolve(node)
    assert set(symbol.props) == {"fn", "quoted"}
    assert symbol.props["fn"].value is fn


def test_unknown_node_kinds_are_unresolved():
    resolver = SymbolResolver(create_global_root())
    assert resolver.resolve({"type": "CallExpression", "callee": ident("f")}) is None
    assert resolver.resolve(None) is None
    assert resolver.bind({"type": "ObjectPattern", "properties": []}, literal(1)) is None


def test_member_expression_literal_keys():
    root = create_global_root()
    resolver = SymbolResolver(root)
    resolver.bind(ident("table"), {"type": "ObjectExpression", "properties": []})

    resolver.bind(member(ident("table"), literal("a"), computed=True), literal("x"))
    resolver.bind(member(ident("table"), literal(0), computed=True), literal("y"))
    resolver.bind(member(ident("table"), literal(None), computed=True), literal("z"))

    assert set(root.props["table"].props) == {"a", "0"}
    assert resolver.resolve(member(ident("table"), ident("a"))) is root.props["table"].props["a"]


def test_create_missing_props_materializes_placeholder():
    root = create_global_root()
    resolver = SymbolResolver(root)
    target = member(member(ident("module"), ident("exports")), ident("nested"))

    assert resolver.resolve(target) is None
    created = resolver.resolve(target, create_missing_props=True)
    assert created is not None and created.is_object
    assert root.props["exports"].props["nested"] is created
    assert resolver.resolve(member(ident("nowhere"), ident("x")), create_missing_props=True) is None


def test_bind_identifier_does_not_clobber_on_failure():
    root = create_global_root()
    resolver = SymbolResolver(root)
    fn = function()
    bound = resolver.bind(ident("handler"), fn)
    assert resolver.bind(ident("handler"), ident("undefinedThing")) is None
    assert root.props["handler"] is bound


def test_bind_member_does_not_clobber_on_failure():
    root = create_global_root()
    resolver = SymbolResolver(root)
    resolver.bind(ident("obj"), {"type": "ObjectExpression", "properties": []})
    bound = resolver.bind(member(ident("obj"), ident("f")), function())
    assert resolver.bind(member(ident("obj"), ident("f")), ident("missing")) is None
    assert root.props["obj"].props["f"] is bound


def test_bind_declaration_always_registers_globally():
    root = create_global_root()
    resolver = SymbolResolver(root)
    scope = SymbolNode()
    decl = {"type": "FunctionDeclaration", "id": ident("run")}
    symbol = resolver.bind(decl, decl, scope)
    assert root.props["run"] is symbol
    assert "run" not in scope.props
    assert symbol.value is decl


def test_assignment_as_value_performs_the_binding():
    root = create_global_root()
    resolver = SymbolResolver(root)
    fn = function()
    symbol = resolver.bind(ident("a"), assign(ident("b"), fn))
    assert root.props["a"] is root.props["b"] is symbol


def test_find_node_handles_cycles_and_diamonds():
    target = function()
    shared = SymbolNode(kind=SymbolKind.OBJECT)
    shared.props["fn"] = SymbolNode(kind=SymbolKind.OBJECT, value=target)
    left = SymbolNode(kind=SymbolKind.OBJECT)
    right = SymbolNode(kind=SymbolKind.OBJECT)
    left.props["shared"] = shared
    right.props["shared"] = shared
    root = SymbolNode(kind=SymbolKind.OBJECT)
    root.props.update({"self": root, "left": left, "right": right})
    left.props["up"] = root

    assert find_node(target, root)
    assert not find_node(function(), root)


def test_find_exported_node_only_searches_flagged_symbols():
    target = function()
    root = create_global_root()
    holder = SymbolNode(kind=SymbolKind.OBJECT)
    holder.props["fn"] = SymbolNode(kind=SymbolKind.OBJECT, value=target)
    root.props["holder"] = holder

    assert not find_exported_node(target, root)
    holder.exported = True
    assert find_exported_node(target, root)


def test_find_exported_node_descends_into_namespaces():
    target = function()
    root = create_global_root()
    ns = SymbolNode(kind=SymbolKind.OBJECT)
    inner = SymbolNode(kind=SymbolKind.OBJECT)
    inner.props["fn"] = SymbolNode(kind=SymbolKind.OBJECT, value=target)
    ns.props["self"] = ns
    ns.props["inner"] = inner
    root.props["ns"] = ns

    assert not find_exported_node(target, root)
    inner.exported = True
    assert find_exported_node(target, root)
    assert not find_exported_node(function(), root)


def test_find_node_follows_long_chains():
    target = function()
    head = SymbolNode(kind=SymbolKind.OBJECT, value=target)
    for _ in range(5000):
        link = SymbolNode(kind=SymbolKind.OBJECT)
        link.props["next"] = head
        head = link

    assert find_node(target, head)
    assert not find_node(function(), head)


def test_var_declarations_share_window_binding():
    ast = program(var("var", "a"), var("let", "b"), statement(assign(ident("a"), literal(1))))
    analysis = parse(ast)
    window = analysis.globals.props["window"]
    assert analysis.globals.props["a"] is window.props["a"]
    assert analysis.globals.props["a"].is_literal


def test_export_specifier_flags_existing_binding():
    fn = function()
    ast = program(
        var("const", "run", fn),
        {
            "type": "ExportNamedDeclaration",
            "declaration": None,
            "specifiers": [
                {"type": "ExportSpecifier", "local": ident("run"), "exported": ident("run")},
                {"type": "ExportSpecifier", "local": ident("ghost"), "exported": ident("ghost")},
            ],
        },
    )
    analysis = parse(ast)
    assert analysis.globals.props["run"].exported
    assert is_exported(fn, analysis)


def test_nested_statements_are_not_traversed():
    fn = function()
    ast = program(
        {
            "type": "IfStatement",
            "test": literal(True),
            "consequent": statement(assign(member(ident("module"), ident("exports")), fn)),
        }
    )
    analysis = parse(ast)
    assert not is_exported(fn, analysis)


def test_parse_rejects_non_program_root():
    with pytest.raises(ExportAnalysisError, match="Program"):
        parse({"type": "ExpressionStatement", "loc": {"start": {"line": 1, "column": 0}}})
    with pytest.raises(ExportAnalysisError):
        parse(None)


def test_trace_events_use_injected_logger():
    logger = RecordingLogger()
    ast = program(
        statement(assign(ident("x"), ident("undefinedThing"))),
        statement(assign(member(ident("nowhere"), ident("prop")), function())),
        {"type": "WhileStatement", "test": literal(True), "body": None},
    )
    parse(ast, logger=logger)
    events = [event for event, _ in logger.events]
    assert "resolver.identifier_unresolved_value" in events
    assert "resolver.member_missing_target" in events
    assert "passes.statement_skipped" in events


def test_trace_events_reach_structlog():
    with capture_logs() as logs:
        parse(program(statement(assign(ident("x"), ident("undefinedThing")))))
    assert any(
        entry["event"] == "resolver.identifier_unresolved_value" and entry["name"] == "x"
        for entry in logs
    )

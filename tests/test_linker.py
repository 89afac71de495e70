from __future__ import annotations

from pathlib import Path

import pytest

from artifacts.models.artifacts.contracts import UNRESOLVED
from graph.linker import build_universes, link
from parse.treesitter_solidity import SourceReadError


def _write_sol(root: Path, relative_path: str, source: str) -> Path:
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


def _calls(universe, contract_name: str, function_name: str):
    contract = next(c for c in universe.contracts if c.name == contract_name)
    function = contract.find_function(function_name)
    assert function is not None
    return function.calls


def test_inherited_call_resolves_to_base(tmp_path: Path) -> None:
    _write_sol(tmp_path, "Base.sol", "contract Base { function greet() public {} }\n")
    child = _write_sol(
        tmp_path,
        "Child.sol",
        """
import "./Base.sol";

contract Child is Base {
    function hello() public {
        greet();
        missing();
    }
}
""",
    )

    universes = build_universes([child], dependency_root=tmp_path / "node_modules")

    assert len(universes) == 1
    universe = universes[0]
    assert universe.entry_file == child.resolve()
    assert [c.name for c in universe.contracts] == ["Base", "Child"]
    assert [call.resolved_id for call in _calls(universe, "Child", "hello")] == [
        "Base:greet",
        UNRESOLVED,
    ]


def test_every_call_gets_a_resolved_id(tmp_path: Path) -> None:
    entry = _write_sol(
        tmp_path,
        "Mixed.sol",
        """
contract Mixed {
    function a() public { b(); c(); }
    function b() internal { ghost(); a(); }
}
""",
    )

    universe = build_universes([entry], dependency_root=tmp_path)[0]

    for contract in universe.contracts:
        for function in contract.functions:
            for call in function.calls:
                assert call.resolved_id is not None


def test_variable_registry_is_shared_across_entry_files(tmp_path: Path) -> None:
    first = _write_sol(tmp_path, "A.sol", "contract A { uint256 amount; }\n")
    second = _write_sol(
        tmp_path,
        "B.sol",
        """
contract B {
    function pay(uint256 value) internal {}
    function run() public { pay(amount); }
}
""",
    )

    together = build_universes([first, second], dependency_root=tmp_path)
    alone = build_universes([second], dependency_root=tmp_path)

    assert _calls(together[1], "B", "run")[0].resolved_id == "B:pay:uint256"
    assert _calls(alone[0], "B", "run")[0].resolved_id == "B:pay:"


def test_ignore_set_is_fresh_per_entry_file(tmp_path: Path) -> None:
    first = _write_sol(
        tmp_path, "Events.sol", "contract Events { event notify(uint256 x); }\n"
    )
    second = _write_sol(
        tmp_path,
        "Caller.sol",
        """
contract Caller {
    function notify(uint256 x) internal {}
    function run() public { notify(1); }
}
""",
    )

    universes = build_universes([first, second], dependency_root=tmp_path)

    assert [c.callee_name for c in _calls(universes[1], "Caller", "run")] == [
        "notify"
    ]


def test_dependency_root_import_resolves(tmp_path: Path) -> None:
    dependency_root = tmp_path / "node_modules"
    _write_sol(
        dependency_root,
        "@oz/access/Ownable.sol",
        """
contract Ownable {
    address private _owner;
    function _transferOwnership(address newOwner) internal {}
}
""",
    )
    entry = _write_sol(
        tmp_path,
        "contracts/Token.sol",
        """
import "@oz/access/Ownable.sol";

contract Token is Ownable {
    function init() public {
        _transferOwnership(msg.sender);
    }
}
""",
    )

    universe = build_universes([entry], dependency_root=dependency_root)[0]

    assert [c.name for c in universe.contracts] == ["Ownable", "Token"]
    assert (
        _calls(universe, "Token", "init")[0].resolved_id
        == "Ownable:_transferOwnership:address"
    )


def test_missing_import_aborts(tmp_path: Path) -> None:
    entry = _write_sol(tmp_path, "A.sol", 'import "./Gone.sol";\ncontract A {}\n')

    with pytest.raises(SourceReadError, match="Gone.sol"):
        build_universes([entry], dependency_root=tmp_path)


class _RecordingConsumer:
    def __init__(self) -> None:
        self.seen: list[tuple[str, list[str]]] = []

    def consume(self, entry_file: Path, contracts) -> None:
        self.seen.append((entry_file.name, [c.name for c in contracts]))


def test_link_feeds_consumers_in_entry_order(tmp_path: Path) -> None:
    first = _write_sol(tmp_path, "Z.sol", "contract Z {}\n")
    second = _write_sol(tmp_path, "A.sol", 'import "./Z.sol";\ncontract A is Z {}\n')
    consumers = [_RecordingConsumer(), _RecordingConsumer()]

    link([first, second], consumers=consumers, dependency_root=tmp_path)

    expected = [("Z.sol", ["Z"]), ("A.sol", ["Z", "A"])]
    assert consumers[0].seen == expected
    assert consumers[1].seen == expected


def test_state_variable_member_call_resolves_through_import(tmp_path: Path) -> None:
    _write_sol(
        tmp_path,
        "Token.sol",
        "contract Token { function transfer(uint256 amount) external {} }\n",
    )
    entry = _write_sol(
        tmp_path,
        "Wallet.sol",
        """
import "./Token.sol";

contract Wallet {
    Token x;

    function pay() public payable {
        x.transfer(msg.value);
    }
}
""",
    )

    universe = build_universes([entry], dependency_root=tmp_path)[0]

    calls = _calls(universe, "Wallet", "pay")
    assert [call.callee_name for call in calls] == ["transfer"]
    assert calls[0].resolved_id == "Token:transfer:uint256"


def test_overload_is_selected_by_argument_type(tmp_path: Path) -> None:
    entry = _write_sol(
        tmp_path,
        "Overloads.sol",
        """
contract Overloads {
    address x;
    uint256 n;

    function f(uint256 amount) internal {}
    function f(address who) internal {}

    function run() public {
        f(x);
        f(n);
    }
}
""",
    )

    universe = build_universes([entry], dependency_root=tmp_path)[0]

    contract = universe.contracts[0]
    assert [fn.signature_id for fn in contract.functions] == [
        "Overloads:f:uint256",
        "Overloads:f:address",
        "Overloads:run",
    ]
    assert [call.resolved_id for call in _calls(universe, "Overloads", "run")] == [
        "Overloads:f:address",
        "Overloads:f:uint256",
    ]

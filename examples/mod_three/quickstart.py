"""
dfakit quickstart

Builds the mod-three machine from its definition file and runs a few
binary numbers through it, then shows how a rejected input is reported.

Run:
  cd examples/mod_three
  python quickstart.py
"""

from pathlib import Path

from dfakit import MachineParser


def main() -> None:
    machine = MachineParser.load_machine(Path(__file__).parent / "mod_three.yaml")

    for binary in ("110", "1010", "1000011111", ""):
        print(f"{binary or '(empty)':>12} mod 3 = {machine.process(binary)}")

    result = machine.run("x111115")
    print(f"{'x111115':>12} -> {result.kind.value}: {result.error}")


if __name__ == "__main__":
    main()

from rich.pretty import pprint

from argweave import *

parser = Parser("pkg", version="0.1.0", description="A small package manager.")
parser.add_argument(["-q", "--quiet"], description="Only print errors.")
parser.add_argument(["-d", "--debug"], type="count", description="Increase debug output (repeatable).")

install = parser.add_command("install", description="Install one or more packages.")
install.add_argument(["PACKAGE"], nargs="+", description="Names of the packages to install.")
install.add_argument(["--prefix"], type="path", description="Installation root.")
mode = install.add_argument(["--mode"], type="string", description="Dependency resolution mode.")
mode.add_value("strict", description="Fail on any conflict.")
mode.add_value("lenient", description="Pick the newest compatible release.")

remove = parser.add_command("remove", description="Remove installed packages.")
remove.add_argument(["NAME"], nargs="+", key="targets", description="Names of the packages to remove.")


if __name__ == '__main__':
    pprint(parser.parse_arguments())

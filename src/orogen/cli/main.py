# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the oroGen command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from orogen.config import CONFIG_FILE_NAME, GenerationConfig, GenerationContext, load_generation_config
from orogen.errors import OrogenError
from orogen.loader.description import load_project
from orogen.project.dependencies import compute_build_dependencies
from orogen.project.project import Project
from orogen.typesystem.exchange import REGISTRY_SUFFIX, TYPELIST_SUFFIX, write_registry, write_typelist

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the oroGen CLI."""
    parser = argparse.ArgumentParser(
        prog="orogen",
        description="oroGen: component project model and dependency resolution",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution steps to stderr")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that a project description resolves",
        description="Load a project description, resolve all its imports and validate it for generation.",
    )
    _add_project_arguments(check_parser)

    # deps subcommand
    deps_parser = subparsers.add_parser(
        "deps",
        help="Print the build dependencies of a project",
        description="Print the build dependencies of the project's task library, sorted by variable name.",
    )
    _add_project_arguments(deps_parser)
    deps_parser.add_argument("--json", action="store_true", help="Print the dependencies as JSON")

    # tasks subcommand
    tasks_parser = subparsers.add_parser(
        "tasks",
        help="List the task contexts visible in a project",
        description="List the task contexts visible in a project, local ones marked with '*'.",
    )
    _add_project_arguments(tasks_parser)

    # types subcommand
    types_parser = subparsers.add_parser(
        "types",
        help="List or export the merged type registry",
        description="List the merged type registry of a project, or export it with the project's type list.",
    )
    _add_project_arguments(types_parser)
    types_parser.add_argument(
        "--export",
        metavar="DIR",
        help="Write <name>.tlb and <name>.typelist for the project's own toolkit into DIR",
    )

    args = parser.parse_args()
    if args.verbose:
        _setup_logging()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("description", help="Path to the project description file")
    parser.add_argument(
        "--config",
        help=f"Generation configuration file (default: {CONFIG_FILE_NAME} next to the description, if present)",
    )
    parser.add_argument("--target", help="Target platform (default: $OROCOS_TARGET or gnulinux)")
    corba = parser.add_mutually_exclusive_group()
    corba.add_argument("--corba", dest="corba", action="store_true", default=None, help="Enable CORBA transports")
    corba.add_argument("--no-corba", dest="corba", action="store_false", help="Disable CORBA transports")
    parser.add_argument(
        "--extended-states",
        action="store_true",
        default=None,
        help="Enable extended state support in task contexts",
    )
    parser.add_argument(
        "--pkg-config-path",
        action="append",
        default=[],
        metavar="DIR",
        help="Additional pkg-config directory (may be repeated)",
    )


def _setup_logging() -> None:
    """Send debug output of all loggers to stderr."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)


def _dispatch(args: argparse.Namespace) -> int:
    """Load the project and dispatch to the appropriate subcommand handler."""
    description = Path(args.description).resolve()
    if not description.is_file():
        print(f"Error: description file '{description}' does not exist.", file=sys.stderr)
        return 1

    try:
        context = _build_context(args, description.parent)
        project = load_project(description, context)
        if args.command == "check":
            return _cmd_check(project)
        if args.command == "deps":
            return _cmd_deps(project, args)
        if args.command == "tasks":
            return _cmd_tasks(project)
        if args.command == "types":
            return _cmd_types(project, args)
    except OrogenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _build_context(args: argparse.Namespace, base_dir: Path) -> GenerationContext:
    """Merge the configuration file and command-line flags into a context."""
    config = GenerationConfig()
    config_base = base_dir
    if args.config is not None:
        config_path = Path(args.config).resolve()
        config = load_generation_config(config_path)
        config_base = config_path.parent
    elif (base_dir / CONFIG_FILE_NAME).exists():
        config = load_generation_config(base_dir / CONFIG_FILE_NAME)

    if args.target:
        config.target = args.target
    if args.corba is not None:
        config.corba = args.corba
    if args.extended_states:
        config.extended_states = True
    cli_dirs = [str(Path(entry).resolve()) for entry in args.pkg_config_path]
    config.pkg_config_path = cli_dirs + config.pkg_config_path
    return GenerationContext.from_config(config, config_base)


def _cmd_check(project: Project) -> int:
    """Handle the check subcommand."""
    project.prepare_generation()
    print(
        f"Project '{project.name}' is consistent: "
        f"{len(project.self_tasks)} task context(s), "
        f"{len(project.used_toolkits)} toolkit(s), "
        f"{len(project.used_task_libraries)} task library(ies), "
        f"{len(project.registry)} type(s)."
    )
    return 0


def _cmd_deps(project: Project, args: argparse.Namespace) -> int:
    """Handle the deps subcommand."""
    project.prepare_generation()
    deps = compute_build_dependencies(project)
    if args.json:
        print(json.dumps([dep.model_dump() for dep in deps], indent=2))
        return 0
    for dep in deps:
        facets = [facet for facet in ("compile", "link", "corba") if getattr(dep, facet)]
        print(f"{dep.var_name:<32} {dep.pkg_name:<40} {','.join(facets)}")
    return 0


def _cmd_tasks(project: Project) -> int:
    """Handle the tasks subcommand."""
    own = {task.name for task in project.self_tasks}
    for task in project.tasks:
        marker = "*" if task.name in own else " "
        parent = f" < {task.superclass}" if task.superclass else ""
        print(f"{marker} {task.name}{parent}")
    return 0


def _cmd_types(project: Project, args: argparse.Namespace) -> int:
    """Handle the types subcommand."""
    if args.export is None:
        for name in project.registry.names():
            print(name)
        return 0

    project.prepare_generation()
    if project.toolkit is None:
        print(f"Error: project '{project.name}' defines no types to export.", file=sys.stderr)
        return 1
    out_dir = Path(args.export)
    write_registry(project.registry, out_dir / (f"{project.name}" + REGISTRY_SUFFIX))
    write_typelist(project.toolkit.type_names, out_dir / (f"{project.name}" + TYPELIST_SUFFIX))
    print(f"Exported {len(project.toolkit.type_names)} type(s) to '{out_dir}'.")
    return 0

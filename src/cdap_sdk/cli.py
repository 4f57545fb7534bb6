#!/usr/bin/env python3
"""
Reconcile local artifacts declared in a JSON manifest against the registry.
"""
import argparse
import logging
import sys
from typing import List, Optional

from rich import progress

from .apply import Reconciler, StateFile, load_manifest
from .config import RegistryConfig
from .exceptions import SDKException
from .models.enums import PlanAction
from .resources.local_artifact import LocalArtifactResource, ResourceData

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = ".cdap-artifacts.state.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdap-artifacts",
        description="Upload, keep and remove local artifacts in a CDAP registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cdap-artifacts apply artifacts.json
  cdap-artifacts apply artifacts.json --dry-run
  cdap-artifacts --namespace etl exists my-plugin
  cdap-artifacts destroy --state .cdap-artifacts.state.json
        """,
    )
    parser.add_argument("--host", help="Registry base URL (default: $CDAP_HOST)")
    parser.add_argument(
        "--namespace", help="Default namespace (default: $CDAP_NAMESPACE or 'default')"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    apply_p = sub.add_parser("apply", help="Create, replace or delete artifacts to match the manifest")
    apply_p.add_argument("manifest", help="JSON manifest with an 'artifacts' array")
    apply_p.add_argument("--state", default=DEFAULT_STATE_PATH, help="State file path")
    apply_p.add_argument(
        "-n", "--dry-run", action="store_true", help="Only print the plan"
    )

    destroy_p = sub.add_parser("destroy", help="Delete every artifact tracked in the state file")
    destroy_p.add_argument("--state", default=DEFAULT_STATE_PATH, help="State file path")

    exists_p = sub.add_parser("exists", help="Check whether an artifact name is registered")
    exists_p.add_argument("name", help="Artifact name")

    return parser


def _print_plan(actions) -> None:
    for a in actions:
        suffix = f" (changed: {', '.join(a.changed)})" if a.changed else ""
        print(f"  {a.action.value:<8} {a.key}{suffix}")


def run_apply(reconciler: Reconciler, manifest: str, config: RegistryConfig, dry_run: bool) -> int:
    desired = load_manifest(manifest, config.default_namespace)
    actions = reconciler.plan(desired)
    pending = [a for a in actions if a.action != PlanAction.NOOP]

    print(f"Plan: {len(pending)} change(s), {len(actions) - len(pending)} unchanged")
    _print_plan(pending)
    if dry_run or not pending:
        return 0

    for action in progress.track(pending, description="Applying..."):
        reconciler.execute(action)
    print("Apply complete")
    return 0


def run_destroy(reconciler: Reconciler) -> int:
    actions = reconciler.destroy()
    print(f"Destroyed {len(actions)} artifact(s)")
    return 0


def run_exists(resource: LocalArtifactResource, name: str, config: RegistryConfig) -> int:
    found = resource.exists(ResourceData({"name": name}))
    print(f"{config.default_namespace}/{name}: {'exists' if found else 'missing'}")
    return 0 if found else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = None
    try:
        config = RegistryConfig.from_env(host=args.host, default_namespace=args.namespace)
        client = config.build_client()
        resource = LocalArtifactResource(client, config.default_namespace)

        if args.command == "apply":
            reconciler = Reconciler(resource, StateFile(args.state))
            return run_apply(reconciler, args.manifest, config, args.dry_run)
        if args.command == "destroy":
            return run_destroy(Reconciler(resource, StateFile(args.state)))
        return run_exists(resource, args.name, config)
    except SDKException as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    sys.exit(main())

"""Walk through the client API against a running supervisord."""

from __future__ import annotations

import os
import sys

from supervisord_client import FaultError, SupervisorClient, SupervisorError

PROCESS = os.getenv("SUPERVISOR_DEMO_PROCESS", "")


def log_section(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def show_processes(client: SupervisorClient) -> None:
    infos = client.get_all_process_info()
    if not infos:
        print("(no processes)")
        return
    width = max(len(info.name) for info in infos)
    for info in infos:
        print(f"{info.name:<{width}}  {info.statename:<10} pid={info.pid}  {info.description}")


def main() -> int:
    client = SupervisorClient.from_env(log_level="debug")
    try:
        log_section(f"Daemon at {client.rpc_url}")
        print("version", client.get_version())

        log_section("Processes")
        show_processes(client)

        if PROCESS:
            log_section(f"Restarting {PROCESS}")
            try:
                client.stop_process(PROCESS)
            except FaultError as exc:
                print("stop refused:", exc.string)
            print("started", client.start_process(PROCESS))

        log_section("Reloading configuration")
        result = client.reload_config()
        print("added  ", result.added)
        print("changed", result.changed)
        print("removed", result.removed)
    except SupervisorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

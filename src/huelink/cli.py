import argparse
import logging
import sys

from huelink.api.bridge import HueBridge
from huelink.config import load_settings
from huelink.repo.hue_repository import HueRepository


def _pair(bridge: HueBridge, args) -> int:
    print(f"Bridge: {bridge.ip}")
    print("Press the link button on the bridge (the LED starts blinking).")
    username = bridge.link(args.app, args.device)
    if not username:
        print("No username received. Press the button and run the command again.")
        return 1
    print(f"username = {username}")
    print(f"Saved to {bridge.credentials.path}")
    return 0


def _test(bridge: HueBridge, args) -> int:
    ok, status = bridge.test_connection()
    print(status.value)
    if not ok:
        print(bridge.last_reply)
    return 0 if ok else 1


def _list(bridge: HueBridge, args) -> int:
    repository = HueRepository(bridge)
    devices = repository.discover_lights() if args.command == "lights" else repository.discover_groups()
    if not devices and not bridge.last_reply.valid:
        print(bridge.last_reply)
        return 1
    for device in devices:
        print(f"{device.id:>3}  {device.name}")
    return 0


def _switch(bridge: HueBridge, args) -> int:
    repository = HueRepository(bridge)
    repository.discover_lights()
    light = repository.light(args.light_id)
    if light is None:
        print(f"Light {args.light_id} not found.")
        return 1
    ok = light.turn_on(args.command == "on")
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="huelink", description="Talk to a Philips Hue bridge.")
    parser.add_argument("-b", "--bridge", help="Bridge IP address (default: $HUE_BRIDGE_IP).")
    parser.add_argument("-u", "--username", help="Bridge username (default: stored credential).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    sub = parser.add_subparsers(dest="command", required=True)

    pair = sub.add_parser("pair", help="Create a username on the bridge.")
    pair.add_argument("--app", default="huelink")
    pair.add_argument("--device", default="")
    pair.set_defaults(handler=_pair)

    sub.add_parser("test", help="Check the connection.").set_defaults(handler=_test)
    sub.add_parser("lights", help="List lights.").set_defaults(handler=_list)
    sub.add_parser("groups", help="List groups.").set_defaults(handler=_list)

    for name in ("on", "off"):
        switch = sub.add_parser(name, help=f"Switch a light {name}.")
        switch.add_argument("light_id", type=int)
        switch.set_defaults(handler=_switch)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(bridge_ip=args.bridge, username=args.username)
        bridge = HueBridge(settings=settings)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    with bridge:
        return args.handler(bridge, args)


if __name__ == "__main__":
    sys.exit(main())

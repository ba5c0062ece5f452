import sys
import logging
import argparse

from navgrid.simulation import Simulation
from navgrid.world import World


def main(argv=None):
    parser = argparse.ArgumentParser(description="Grid A* pathfinding sandbox")
    parser.add_argument(
        "world", nargs="?", help="JSON world file (default: bundled layout)"
    )
    parser.add_argument(
        "--log-level", default="INFO", help="logging level (default: INFO)"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    world = World(world_file=args.world) if args.world else World()
    Simulation(world=world).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

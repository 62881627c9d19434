"""Allow running orchestrator as: python -m signal_gate.orchestrator [--config path]."""

import argparse

from signal_gate.orchestrator.runner import main

parser = argparse.ArgumentParser(description="Signal gate maintenance loop")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)

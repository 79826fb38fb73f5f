"""Command-line entry point for the taxi fare pipeline.

Usage examples:
  predict:   taxi-fare                 (load Data/Model.zip, run the sample prediction)
  train:     taxi-fare train
  all:       taxi-fare run             (train + evaluate + sample prediction)
  customize: taxi-fare --config config/config.yaml evaluate
"""
import argparse
import logging

from taxi_fare.config import load_config, resolve_path
from taxi_fare.data.synthetic import write_reference_files
from taxi_fare.pipelines.pipeline import TaxiFarePipeline

ACTIONS = ["predict", "train", "evaluate", "run", "score", "generate"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train and use the taxi fare regression model.")
    parser.add_argument("action", nargs="?", default="predict", choices=ACTIONS,
                        help="Action to perform (default: predict with the saved model).")
    parser.add_argument("--config", "-c", default=None,
                        help="Path to a config YAML file overriding the defaults")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)

    logging.basicConfig(
        level=cfg.logging.level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.action == "generate":
        write_reference_files(
            resolve_path(cfg, "train_csv"),
            resolve_path(cfg, "test_csv"),
            seed=cfg.train.seed,
            separator=cfg.data.separator,
        )
        return 0

    pipeline = TaxiFarePipeline(cfg)

    if args.action == "predict":
        pipeline.load_and_use_model()
    elif args.action == "train":
        pipeline.train()
    elif args.action == "evaluate":
        pipeline.evaluate(pipeline.load_model())
    elif args.action == "run":
        pipeline.run()
    elif args.action == "score":
        pipeline.score_test_file()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import argparse
import json
import sys
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Optional

from loguru import logger

import avstools.configuration.constants as global_constants
from avstools.ai.openai import OpenAIChatAgent
from avstools.configuration.configuration import (
    NodeConfig,
    RuntimeConfig,
    get_node_config,
    get_provider_config,
    load_node_config,
)
from avstools.task_processing.execution import TaskExecutor, handle_execute_request
from avstools.task_processing.validation import StrategyValidator, handle_validate_request
from avstools.utilities.similarity import calculate_string_similarity
from avstools.utilities.submission import DryRunTaskSubmitter, JsonRpcTaskSubmitter

def _load_node_config(config_path: Optional[str]) -> NodeConfig:
    return load_node_config(config_path) if config_path else get_node_config()

def _agent_factory():
    return partial(OpenAIChatAgent.from_config, get_provider_config())

def _print_reply(status: int, payload: dict) -> int:
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if status == 200 else 1

def run_execute(args) -> int:
    if RuntimeConfig.DRY_RUN:
        submitter = DryRunTaskSubmitter()
        failure_policy = global_constants.FailurePolicy.SKIP_SUBMISSION
    else:
        node_config = _load_node_config(args.config)
        submitter = JsonRpcTaskSubmitter(
            rpc_url=node_config.rpc_url,
            performer_address=node_config.performer_address
        )
        failure_policy = node_config.failure_policy

    executor = TaskExecutor(
        agent_factory=_agent_factory(),
        submitter=submitter,
        failure_policy=failure_policy
    )
    body = {
        "taskDefinitionId": args.task_definition_id,
        "price": args.price,
        "portfolio": args.portfolio,
        "model": args.model,
        "apr": args.apr,
    }
    return _print_reply(*handle_execute_request(executor, body))

def _price_margin(value: str) -> Decimal:
    try:
        margin = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid price margin: {value!r}")
    if not margin.is_finite() or margin < 0:
        raise argparse.ArgumentTypeError(f"price margin must be a non-negative number, got: {value!r}")
    return margin

def run_validate(args) -> int:
    if args.threshold is not None:
        threshold = args.threshold
        price_margin = global_constants.DEFAULT_PRICE_MARGIN
    else:
        node_config = _load_node_config(args.config)
        threshold = node_config.similarity_threshold
        price_margin = node_config.price_margin
    if args.price_margin is not None:
        price_margin = args.price_margin

    validator = StrategyValidator(
        threshold=threshold,
        agent_factory=_agent_factory() if args.rederive or args.review else None,
        price_margin=price_margin
    )
    body = {
        "proofOfTask": args.proof_of_task,
        "taskDefinitionId": args.task_definition_id,
        "referenceStrategy": args.reference_strategy,
        "expectedPrice": args.expected_price,
        "review": args.review,
    }
    return _print_reply(*handle_validate_request(validator, body))

def run_similarity(args) -> int:
    print(f"{calculate_string_similarity(args.first, args.second):.4f}")
    return 0

def main(argv=None):
    parser = argparse.ArgumentParser(description="AVS yield farming strategy tools")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    parser.add_argument("--config", help="Path to the node configuration JSON file")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    execute_parser = subparsers.add_parser('execute', help='Generate a strategy and submit the proof of task')
    execute_parser.add_argument("--task-definition-id", type=int, default=0)
    execute_parser.add_argument("--price", default="")
    execute_parser.add_argument("--portfolio", default="")
    execute_parser.add_argument("--apr", default="")
    execute_parser.add_argument("--model", default="",
                                help="Model identifier (defaults to AVS_DEFAULT_MODEL or the built-in default)")
    execute_parser.add_argument("--dry-run", action="store_true",
                                help="Log the proof of task instead of sending it")

    validate_parser = subparsers.add_parser('validate', help='Validate a performer proof of task')
    validate_parser.add_argument("--proof-of-task", required=True)
    validate_parser.add_argument("--task-definition-id", type=int, default=0)
    reference_group = validate_parser.add_mutually_exclusive_group(required=True)
    reference_group.add_argument("--reference-strategy", help="Strategy to compare against")
    reference_group.add_argument("--rederive", action="store_true",
                                 help="Generate the reference strategy from the same inputs")
    validate_parser.add_argument("--threshold", type=float,
                                 help="Similarity threshold (defaults to the node configuration)")
    validate_parser.add_argument("--expected-price", help="Also check the claimed price against this value")
    validate_parser.add_argument("--price-margin", type=_price_margin,
                                 help="Relative price tolerance (defaults to the node configuration, or 0.05 with --threshold)")
    validate_parser.add_argument("--review", action="store_true",
                                 help="Also ask the claimed model to judge the strategy")

    similarity_parser = subparsers.add_parser('similarity', help='Print the similarity of two texts')
    similarity_parser.add_argument("first")
    similarity_parser.add_argument("second")

    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    if args.command == 'execute':
        RuntimeConfig.DRY_RUN = args.dry_run
        sys.exit(run_execute(args))
    elif args.command == 'validate':
        sys.exit(run_validate(args))
    elif args.command == 'similarity':
        sys.exit(run_similarity(args))
    else:
        parser.print_help()

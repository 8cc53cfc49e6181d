import json
import unittest
from dataclasses import FrozenInstanceError
from avstools.models.models import (
    TaskRecord,
    MarketInputs,
    ExecuteTaskRequest,
    ValidateTaskRequest,
    CustomResponse,
    ErrorResponse,
    ConversationMessage
)
from avstools.utilities.exceptions import SerializationError

RECORD = TaskRecord(
    price="3000",
    portfolio="50% ETH",
    model="gpt-4o",
    strategy='{"exchanges": {"binance": {"positions": []}}}',
    apr="5%"
)

class TestTaskRecord(unittest.TestCase):
    def test_proof_of_task_decodes_to_equal_record(self):
        self.assertEqual(TaskRecord.from_proof_of_task(RECORD.to_proof_of_task()), RECORD)

    def test_proof_of_task_has_stable_key_order(self):
        proof = RECORD.to_proof_of_task()
        self.assertEqual(list(json.loads(proof).keys()), ["price", "portfolio", "model", "strategy", "apr"])
        self.assertEqual(proof, RECORD.to_proof_of_task())
        self.assertTrue(proof.startswith('{"price":"3000","portfolio":'))

    def test_proof_of_task_keeps_unicode_text(self):
        record = TaskRecord(price="Ξ 3000", portfolio="", model="", strategy="", apr="")
        self.assertIn("Ξ 3000", record.to_proof_of_task())

    def test_non_text_field_cannot_be_serialized(self):
        record = TaskRecord(price=3000, portfolio="", model="", strategy="", apr="")
        with self.assertRaises(SerializationError):
            record.to_proof_of_task()

    def test_malformed_proof_of_task(self):
        for proof in ["not json", "[1, 2]", "42"]:
            with self.subTest(proof=proof):
                with self.assertRaises(SerializationError):
                    TaskRecord.from_proof_of_task(proof)

    def test_missing_fields_decode_to_empty_text(self):
        record = TaskRecord.from_proof_of_task('{"price": "3000", "strategy": 7}')
        self.assertEqual(record, TaskRecord(price="3000", portfolio="", model="", strategy="", apr=""))

    def test_records_are_immutable(self):
        with self.assertRaises(FrozenInstanceError):
            RECORD.strategy = "changed"

    def test_from_generation_and_market_inputs(self):
        inputs = MarketInputs(price="3000", portfolio="50% ETH", apr="5%")
        record = TaskRecord.from_generation(inputs, "gpt-4o", "strategy")
        self.assertEqual(record.market_inputs, inputs)
        self.assertEqual(record.model, "gpt-4o")
        self.assertEqual(record.strategy, "strategy")

class TestExecuteTaskRequest(unittest.TestCase):
    def test_complete_body(self):
        request = ExecuteTaskRequest.from_request_body({
            "taskDefinitionId": 3, "price": "3000", "portfolio": "50% ETH", "model": "gpt-4o", "apr": "5%"
        })
        self.assertEqual(request, ExecuteTaskRequest(3, "3000", "50% ETH", "gpt-4o", "5%"))
        self.assertEqual(request.market_inputs, MarketInputs("3000", "50% ETH", "5%"))

    def test_malformed_fields_degrade_to_defaults(self):
        cases = [
            None,
            "not a dict",
            [],
            {},
            {"taskDefinitionId": "7", "price": 3000, "portfolio": None, "model": ["gpt"], "apr": 5},
            {"taskDefinitionId": True},
            {"taskDefinitionId": 7.0},
        ]
        for body in cases:
            with self.subTest(body=body):
                self.assertEqual(ExecuteTaskRequest.from_request_body(body), ExecuteTaskRequest())

    def test_partial_body_keeps_valid_fields(self):
        request = ExecuteTaskRequest.from_request_body({"price": "3000", "apr": 5})
        self.assertEqual(request, ExecuteTaskRequest(price="3000"))

class TestValidateTaskRequest(unittest.TestCase):
    def test_decoding(self):
        request = ValidateTaskRequest.from_request_body({
            "proofOfTask": "{}", "taskDefinitionId": 2, "referenceStrategy": "s", "expectedPrice": 3000
        })
        self.assertEqual(request.proof_of_task, "{}")
        self.assertEqual(request.task_definition_id, 2)
        self.assertEqual(request.reference_strategy, "s")
        self.assertIsNone(request.expected_price)
        self.assertEqual(ValidateTaskRequest.from_request_body(None), ValidateTaskRequest())

    def test_review_flag_must_be_a_bool(self):
        self.assertTrue(ValidateTaskRequest.from_request_body({"review": True}).review)
        for value in ["true", 1, None]:
            with self.subTest(value=value):
                self.assertFalse(ValidateTaskRequest.from_request_body({"review": value}).review)

class TestResponses(unittest.TestCase):
    def test_envelopes(self):
        self.assertEqual(
            CustomResponse(data={"strategy": "s"}, message="ok").to_dict(),
            {"data": {"strategy": "s"}, "message": "ok"}
        )
        self.assertEqual(
            ErrorResponse(message="Failed to fetch strategy").to_dict(),
            {"data": {}, "error": True, "message": "Failed to fetch strategy"}
        )

    def test_message_constructors(self):
        self.assertEqual(ConversationMessage.system("s"), ConversationMessage("system", "s"))
        self.assertEqual(ConversationMessage.user("u").role, "user")
        self.assertEqual(ConversationMessage.assistant("a").role, "assistant")

if __name__ == '__main__':
    unittest.main()

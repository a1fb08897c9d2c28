import json
import os
import tempfile
import unittest

from cli import build_tree_report, load_conditions, main, run_demo
from rewardengine import leaf_hash, verify_proof


class TestCli(unittest.TestCase):

    def setUp(self):
        self.conditions = {"alice": 2, "bob": 0, "carol": 5}

    def test_tree_report_proofs_verify(self):
        report = build_tree_report(self.conditions)
        for claimant, claim in report["claims"].items():
            self.assertEqual(claim["leaf"], leaf_hash(claimant, claim["condition_count"]).hex())
            self.assertTrue(verify_proof(claim["proof"], report["root"], bytes.fromhex(claim["leaf"])))

    def test_load_conditions_validates_counts(self):
        with tempfile.TemporaryDirectory() as tmp:
            good = os.path.join(tmp, "good.json")
            bad = os.path.join(tmp, "bad.json")
            with open(good, "w", encoding="utf-8") as f:
                json.dump(self.conditions, f)
            with open(bad, "w", encoding="utf-8") as f:
                json.dump({"alice": -1}, f)

            self.assertEqual(load_conditions(good), self.conditions)
            with self.assertRaises(ValueError):
                load_conditions(bad)
            self.assertEqual(main(["tree", bad]), 2)

    def test_preview_and_verify_exit_codes(self):
        self.assertEqual(main(["preview", "--shares", "4", "--base", "5000"]), 0)
        report = build_tree_report(self.conditions)
        args = ["verify", "--root", report["root"], "--claimant", "carol", "--count", "5", "--proof"]
        self.assertEqual(main(args + report["claims"]["carol"]["proof"]), 0)
        self.assertEqual(main(["verify", "--root", report["root"], "--claimant", "carol", "--count", "6"]), 1)

    def test_demo_runs_both_programs(self):
        snapshot = run_demo()
        # 400 weighted auction + 50 base auction + 2 assets * 200 holding
        self.assertEqual(snapshot["total_supply"], 850)
        self.assertEqual(len(snapshot["last_claimed"]), 2)


if __name__ == "__main__":
    unittest.main()

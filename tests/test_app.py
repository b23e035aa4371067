import json
import os
import tempfile
import unittest
from collections import defaultdict

from app import app as flask_app  # noqa: E402
import app as app_mod             # noqa: E402
from game import deal_values      # noqa: E402


def _ids_by_value(pairs, seed):
    out = defaultdict(list)
    for i, v in enumerate(deal_values(pairs, seed)):
        out[v].append(i)
    return list(out.values())


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self._orig_path = flask_app.config["HIGHSCORES_PATH"]
        flask_app.config["HIGHSCORES_PATH"] = os.path.join(self._td.name, "scores.json")
        self.client = flask_app.test_client()

    def tearDown(self):
        flask_app.config["HIGHSCORES_PATH"] = self._orig_path
        self._td.cleanup()

    def _post(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def _new(self, pairs, seed=None):
        r = self._post("/api/new", {"pairs": pairs, "seed": seed})
        self.assertEqual(r.status_code, 200)
        return r.get_json()

    def test_given_new_game_when_posted_then_session_and_hidden_cards_returned(self):
        d = self._new(5, seed=1)
        self.assertTrue(d["ok"])
        self.assertIn("sessionId", d)
        state = d["state"]
        self.assertEqual(len(state["cards"]), 10)
        self.assertTrue(all(c["value"] is None for c in state["cards"]))
        self.assertEqual(state["attempts"], 0)
        self.assertFalse(state["completed"])
        self.assertEqual(state["turnState"], "idle")

        r = self.client.get(f"/api/state/{d['sessionId']}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.get_json()["state"]["cards"]), 10)

    def test_given_bad_pair_count_when_new_then_400(self):
        for payload in ({"pairs": 0}, {"pairs": -2}, {"pairs": "abc"}, {"pairs": [1]}):
            r = self._post("/api/new", payload)
            self.assertEqual(r.status_code, 400, payload)
            self.assertFalse(r.get_json()["ok"])

    def test_given_unknown_session_when_requested_then_404(self):
        self.assertEqual(self.client.get("/api/state/nope").status_code, 404)
        self.assertEqual(self._post("/api/flip", {"sessionId": "nope", "cardId": 0}).status_code, 404)
        self.assertEqual(self._post("/api/resolve", {}).status_code, 404)
        self.assertEqual(self.client.get("/api/score/nope").status_code, 404)

    def test_given_single_pair_when_solved_then_score_and_high_score_saved(self):
        d = self._new(1)
        sid = d["sessionId"]
        r1 = self._post("/api/flip", {"sessionId": sid, "cardId": 0})
        d1 = r1.get_json()
        self.assertTrue(d1["accepted"])
        self.assertIsNotNone(d1["state"]["cards"][0]["value"])

        d2 = self._post("/api/flip", {"sessionId": sid, "cardId": 1}).get_json()
        self.assertTrue(d2["state"]["completed"])
        self.assertEqual(d2["state"]["attempts"], 1)

        score = self.client.get(f"/api/score/{sid}").get_json()
        self.assertTrue(score["completed"])
        self.assertGreater(score["score"], 0)

        saved = self._post("/api/highscores/save", {"sessionId": sid, "playerName": "Ann"}).get_json()
        self.assertTrue(saved["ok"])
        self.assertTrue(saved["added"])
        self.assertEqual(saved["rank"], 1)
        self.assertEqual(saved["entry"]["playerName"], "Ann")

        entries = self.client.get("/api/highscores").get_json()["entries"]
        self.assertEqual([e["playerName"] for e in entries], ["Ann"])

    def test_given_mismatch_when_flipping_then_pending_until_resolved(self):
        seed = 3
        groups = _ids_by_value(2, seed)
        a, b = groups[0][0], groups[1][0]
        sid = self._new(2, seed=seed)["sessionId"]
        self._post("/api/flip", {"sessionId": sid, "cardId": a})
        d = self._post("/api/flip", {"sessionId": sid, "cardId": b}).get_json()
        self.assertTrue(d["state"]["pendingMismatch"])
        self.assertEqual(d["state"]["attempts"], 1)

        blocked = self._post("/api/flip", {"sessionId": sid, "cardId": groups[0][1]}).get_json()
        self.assertFalse(blocked["accepted"])

        res = self._post("/api/resolve", {"sessionId": sid}).get_json()
        self.assertTrue(res["resolved"])
        self.assertFalse(res["state"]["pendingMismatch"])
        self.assertTrue(all(not c["isFaceUp"] for c in res["state"]["cards"]))

        again = self._post("/api/resolve", {"sessionId": sid}).get_json()
        self.assertFalse(again["resolved"])

    def test_given_bad_card_id_when_flipping_then_400(self):
        sid = self._new(2)["sessionId"]
        r = self._post("/api/flip", {"sessionId": sid, "cardId": "x"})
        self.assertEqual(r.status_code, 400)
        r2 = self._post("/api/flip", {"sessionId": sid})
        self.assertEqual(r2.status_code, 400)

    def test_given_incomplete_game_when_saving_then_not_added(self):
        sid = self._new(3)["sessionId"]
        d = self._post("/api/highscores/save", {"sessionId": sid, "playerName": "Bo"}).get_json()
        self.assertTrue(d["ok"])
        self.assertFalse(d["added"])
        self.assertEqual(d["rank"], -1)
        self.assertEqual(d["entry"]["score"], 0)
        self.assertEqual(self.client.get("/api/highscores").get_json()["entries"], [])

    def test_given_missing_name_when_saving_then_400(self):
        sid = self._new(1)["sessionId"]
        r = self._post("/api/highscores/save", {"sessionId": sid})
        self.assertEqual(r.status_code, 400)

    def test_given_two_sessions_when_one_flips_then_other_unchanged(self):
        s1 = self._new(2, seed=9)["sessionId"]
        s2 = self._new(2, seed=9)["sessionId"]
        self._post("/api/flip", {"sessionId": s1, "cardId": 0})
        st2 = self.client.get(f"/api/state/{s2}").get_json()["state"]
        self.assertFalse(st2["cards"][0]["isFaceUp"])
        self.assertEqual(st2["turnState"], "idle")

    def test_given_saved_scores_when_cleared_then_empty(self):
        sid = self._new(1)["sessionId"]
        self._post("/api/flip", {"sessionId": sid, "cardId": 0})
        self._post("/api/flip", {"sessionId": sid, "cardId": 1})
        self._post("/api/highscores/save", {"sessionId": sid, "playerName": "Cy"})
        r = self._post("/api/highscores/clear", {})
        self.assertTrue(r.get_json()["ok"])
        self.assertEqual(self.client.get("/api/highscores?n=5").get_json()["entries"], [])
        self.assertEqual(self.client.get("/api/highscores?n=x").status_code, 400)

    def test_given_session_cap_when_exceeded_then_oldest_evicted(self):
        orig = flask_app.config["MAX_SESSIONS"]
        flask_app.config["MAX_SESSIONS"] = 2
        try:
            first = self._new(1)["sessionId"]
            self._new(1)
            self._new(1)
            self.assertEqual(self.client.get(f"/api/state/{first}").status_code, 404)
            self.assertLessEqual(len(app_mod._SESSIONS), 2)
        finally:
            flask_app.config["MAX_SESSIONS"] = orig

    def test_given_non_object_body_when_posted_then_treated_as_empty(self):
        for payload in ([1], 42, "text", None):
            r = self._post("/api/new", payload)
            self.assertEqual(r.status_code, 200, payload)
            self.assertEqual(len(r.get_json()["state"]["cards"]), 2 * app_mod.config.default_pairs())

            for url in ("/api/flip", "/api/resolve", "/api/highscores/save"):
                r = self._post(url, payload)
                self.assertEqual(r.status_code, 404, (url, payload))
                self.assertFalse(r.get_json()["ok"])

    def test_given_health_when_requested_then_ok(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.get_json()["ok"])


if __name__ == "__main__":
    unittest.main(verbosity=2)

import unittest

from ghproxy.config import Config, normalize_prefix, parse_tokens


class TestParseTokens(unittest.TestCase):

    def test_mixed_separators(self):
        self.assertEqual(parse_tokens(' "curl", wget |python-requests\n\tGo-http '),
                         ("curl", "wget", "python-requests", "Go-http"))

    def test_empty(self):
        self.assertEqual(parse_tokens(""), ())
        self.assertEqual(parse_tokens(None), ())
        self.assertEqual(parse_tokens(" ,, "), ())


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        cfg = Config.from_env({})
        self.assertEqual(cfg.prefix, "/")
        self.assertFalse(cfg.mirror)
        self.assertFalse(cfg.mirror_raw)
        self.assertEqual(cfg.mirror_base, "https://cdn.jsdelivr.net/gh")
        self.assertEqual(cfg.whitelist, ())
        self.assertEqual(cfg.blocked_agents, frozenset({"netcraft"}))
        self.assertIsNone(cfg.redirect_url)
        self.assertIsNone(cfg.fallback_url)
        self.assertEqual(cfg.max_redirects, 10)

    def test_from_env(self):
        cfg = Config.from_env({
            "GHPROXY_PREFIX": "gh",
            "GHPROXY_JSDELIVR": "1",
            "GHPROXY_MIRROR_BASE": "https://cdn.example/gh/",
            "GHPROXY_WHITELIST": "/owner/ /other/",
            "UA": "BadBot, 'Spider'",
            "URL302": "https://example.com/",
            "URL": "nginx",
        })
        self.assertEqual(cfg.prefix, "/gh/")
        self.assertTrue(cfg.mirror)
        self.assertEqual(cfg.mirror_base, "https://cdn.example/gh")
        self.assertEqual(cfg.whitelist, ("/owner/", "/other/"))
        self.assertEqual(cfg.blocked_agents, frozenset({"netcraft", "badbot", "spider"}))
        self.assertEqual(cfg.redirect_url, "https://example.com/")
        self.assertEqual(cfg.fallback_url, "nginx")

    def test_normalize_prefix(self):
        self.assertEqual(normalize_prefix("/"), "/")
        self.assertEqual(normalize_prefix(""), "/")
        self.assertEqual(normalize_prefix("/gh"), "/gh/")
        self.assertEqual(normalize_prefix("gh/"), "/gh/")

    def test_blocked_agent(self):
        cfg = Config(extra_blocked_agents=("BadBot",))
        self.assertTrue(cfg.is_blocked_agent("Mozilla/5.0 (compatible; NetcraftSurveyAgent/1.0)"))
        self.assertTrue(cfg.is_blocked_agent("BADBOT/2"))
        self.assertFalse(cfg.is_blocked_agent("curl/8.0"))
        self.assertFalse(cfg.is_blocked_agent(None))

    def test_whitelist(self):
        self.assertTrue(Config().is_whitelisted("https://github.com/anyone/repo/archive/x.zip"))
        cfg = Config(whitelist=("/owner/",))
        self.assertTrue(cfg.is_whitelisted("https://github.com/owner/repo/archive/x.zip"))
        self.assertFalse(cfg.is_whitelisted("https://github.com/other/repo/archive/x.zip"))


if __name__ == "__main__":
    unittest.main()

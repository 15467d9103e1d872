from natded.tests import TestCase, main
from natded.global_params import DEFAULT_MAX_PROOF_DEPTH, KernelConfig, global_config
from natded.utils.exceptions import KernelConfigError, NatDedException


class TestKernelConfig(TestCase):
    def setUp(self) -> None:
        global_config.reset()

    def tearDown(self) -> None:
        global_config.reset()

    def test_singleton(self) -> None:
        self.assertIs(KernelConfig(), global_config)
        KernelConfig().set_max_proof_depth(7)
        self.assertEqual(global_config.max_proof_depth, 7)

    def test_reset(self) -> None:
        global_config.set_max_proof_depth(3)
        global_config.reset()
        self.assertEqual(global_config.max_proof_depth, DEFAULT_MAX_PROOF_DEPTH)
        global_config.reset(max_proof_depth=12)
        self.assertEqual(global_config.max_proof_depth, 12)

    def test_reset_rejects_zero(self) -> None:
        global_config.set_max_proof_depth(5)
        with self.assertRaises(KernelConfigError):
            global_config.reset(0)
        self.assertEqual(global_config.max_proof_depth, 5)

    def test_rejects_invalid_depth(self) -> None:
        for depth in (0, -4, "10", True, 2.5):
            with self.assertRaises(KernelConfigError):
                global_config.set_max_proof_depth(depth)
        self.assertEqual(global_config.max_proof_depth, DEFAULT_MAX_PROOF_DEPTH)

    def test_config_error_is_a_kernel_error(self) -> None:
        self.assertTrue(issubclass(KernelConfigError, NatDedException))


if __name__ == "__main__":
    main()

import unittest

import torch

import functrain as ft


torch.manual_seed(0)


class TestCore(unittest.TestCase):

    def setup_core(self, poly: ft.Basis1D, nrows: int = 2, ncols: int = 3):
        domain = ft.BoundedDomain(torch.tensor([-2.0, 3.0]))
        coeffs = torch.randn((nrows, poly.cardinality, ncols))
        return ft.Core(poly, domain, coeffs)

    def test_eval_core(self):
        """Verifies that the evaluation of a core agrees with the 
        evaluation of each of its entries.
        """

        core = self.setup_core(ft.Legendre(order=4))
        xs = torch.linspace(-2.0, 3.0, 7)

        Gs = core.eval(xs)
        self.assertEqual(Gs.shape, torch.Size([7, 2, 3]))
        
        for i in range(2):
            for j in range(3):
                self.assertTrue((Gs[:, i, j] - core[i, j](xs)).abs().max() < 1e-12)
                self.assertTrue((core.eval_deriv(xs)[:, i, j] 
                                 - core[i, j].eval_deriv(xs)).abs().max() < 1e-12)
        return

    def test_eval_core_lagrange(self):

        poly = ft.Lagrange1(num_elems=2)
        domain = ft.BoundedDomain()

        A = torch.tensor([[[1.0, 2.0], 
                           [3.0, 1.0], 
                           [1.0, 4.0]], 
                          [[3.0, 2.0], 
                           [1.0, 2.0],
                           [2.0, 3.0]]])
        core = ft.Core(poly, domain, A)

        xs = torch.tensor([-0.5, 0.0, 0.5])
        Gs = core.eval(xs)

        Gs_true = torch.tensor([[[2.0, 1.5],
                                 [2.0, 2.0]],
                                [[3.0, 1.0],
                                 [1.0, 2.0]],
                                [[2.0, 2.5],
                                 [1.5, 2.5]]])

        self.assertTrue((Gs - Gs_true).abs().max() < 1e-8)
        return

    def test_integrate(self):

        core = self.setup_core(ft.Legendre(order=3))
        ints = core.integrate()

        for i in range(2):
            for j in range(3):
                self.assertAlmostEqual(float(ints[i, j]), float(core[i, j].integrate()), places=12)
        return

    def test_qr(self):
        """Checks that the function-QR decomposition of a core 
        reproduces the core, and that Q has orthonormal columns.
        """

        for poly in [ft.Legendre(order=4), ft.Lagrange1(num_elems=4), ft.Fourier(order=2)]:
            
            core = self.setup_core(poly)
            Q, R = core.qr()
            
            QR = Q.rmul(R)
            gram = Q.contract_left(torch.eye(Q.nrows), Q)
            
            self.assertEqual(R.shape, torch.Size([3, 3]))
            self.assertTrue((QR.coeffs - core.coeffs).abs().max() < 1e-12)
            self.assertTrue((gram - torch.eye(Q.ncols)).abs().max() < 1e-12)
        
        return

    def test_lq(self):
        """Checks that the function-LQ decomposition of a core 
        reproduces the core, and that Q has orthonormal rows.
        """

        for poly in [ft.Legendre(order=4), ft.Lagrange1(num_elems=4), ft.Fourier(order=2)]:
            
            core = self.setup_core(poly)
            L, Q = core.lq()
            
            LQ = Q.lmul(L)
            gram = Q.contract_right(torch.eye(Q.ncols), Q)
            
            self.assertEqual(L.shape, torch.Size([2, 2]))
            self.assertTrue((LQ.coeffs - core.coeffs).abs().max() < 1e-12)
            self.assertTrue((gram - torch.eye(Q.nrows)).abs().max() < 1e-12)
        
        return

    def test_contract(self):
        """Compares the environment contractions with the inner 
        products of individual entries.
        """

        core_a = self.setup_core(ft.Legendre(order=3), nrows=2, ncols=2)
        core_b = self.setup_core(ft.Legendre(order=5), nrows=3, ncols=1)
        Phi = torch.randn((2, 3))

        Phi_next = core_a.contract_left(Phi, core_b)
        Phi_true = torch.zeros((2, 1))
        for j in range(2):
            for i in range(2):
                for k in range(3):
                    Phi_true[j, 0] += Phi[i, k] * core_a[i, j].inner(core_b[k, 0])

        self.assertTrue((Phi_next - Phi_true).abs().max() < 1e-12)

        Psi = torch.randn((2, 1))
        Psi_prev = core_a.contract_right(Psi, core_b)
        Psi_true = torch.zeros((2, 3))
        for i in range(2):
            for k in range(3):
                for j in range(2):
                    Psi_true[i, k] += Psi[j, 0] * core_a[i, j].inner(core_b[k, 0])

        self.assertTrue((Psi_prev - Psi_true).abs().max() < 1e-12)

        with self.assertRaises(ft.ShapeMismatch):
            core_a.contract_left(torch.randn((3, 3)), core_b)
        return

    def test_kron(self):

        core_a = self.setup_core(ft.Legendre(order=2), nrows=2, ncols=3)
        core_b = self.setup_core(ft.Legendre(order=3), nrows=2, ncols=2)
        core_c = core_a.kron(core_b)

        xs = torch.linspace(-2.0, 3.0, 5)
        Gs_a = core_a.eval(xs)
        Gs_b = core_b.eval(xs)
        Gs_c = core_c.eval(xs)

        self.assertEqual(core_c.shape, (4, 6))
        self.assertEqual(core_c.basis.order, 5)
        for n in range(5):
            self.assertTrue((Gs_c[n] - torch.kron(Gs_a[n], Gs_b[n])).abs().max() < 1e-12)
        return

    def test_from_functions(self):

        poly = ft.Legendre(order=1)
        domain = ft.BoundedDomain()
        f = ft.UnivariateFunction.linear(1.0, 0.0, poly, domain)
        g = ft.UnivariateFunction.approximate(lambda xs: xs ** 2, ft.Legendre(order=2), domain)

        core = ft.Core.from_functions([[f, g]])
        xs = torch.linspace(-1.0, 1.0, 5)

        self.assertEqual(core.basis.order, 2)
        self.assertTrue((core[0, 0](xs) - xs).abs().max() < 1e-12)
        self.assertTrue((core[0, 1](xs) - xs ** 2).abs().max() < 1e-12)
        return

    def test_mismatch(self):

        core_a = self.setup_core(ft.Legendre(order=3))
        core_b = ft.Core(
            ft.Legendre(order=3), 
            ft.BoundedDomain(torch.tensor([0.0, 1.0])), 
            torch.randn((2, 4, 3))
        )

        with self.assertRaises(ft.DomainMismatch):
            core_a.kron(core_b)
        with self.assertRaises(ft.ShapeMismatch):
            ft.Core(ft.Legendre(order=3), core_a.domain, torch.randn((2, 5, 3)))
        return


if __name__ == "__main__":
    unittest.main()

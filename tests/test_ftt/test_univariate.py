import unittest

import torch

import functrain as ft


torch.manual_seed(0)


class TestUnivariateFunction(unittest.TestCase):

    def setup_functions(self):
        poly = ft.Legendre(order=3)
        domain = ft.BoundedDomain(torch.tensor([-3.0, 5.0]))
        f = ft.UnivariateFunction.linear(2.0, 1.0, poly, domain)
        g = ft.UnivariateFunction.constant(1.0, poly, domain)
        return f, g

    def test_eval(self):

        f, g = self.setup_functions()

        xs = torch.linspace(-3.0, 5.0, 11)
        
        self.assertTrue((f(xs) - (2.0*xs + 1.0)).abs().max() < 1e-12)
        self.assertTrue((g(xs) - 1.0).abs().max() < 1e-12)
        self.assertTrue((f.eval_deriv(xs) - 2.0).abs().max() < 1e-12)
        return

    def test_integrate(self):
        """Checks the integral and inner products of some simple 
        polynomials over [-3, 5].
        """

        f, g = self.setup_functions()

        self.assertAlmostEqual(float(f.integrate()), 24.0, places=10)
        self.assertAlmostEqual(float(f.inner(g)), 24.0, places=10)
        self.assertAlmostEqual(float(f.inner(f)), 728.0/3.0, places=10)
        self.assertAlmostEqual(float(g.norm()), 8.0 ** 0.5, places=10)
        return

    def test_combine_multiply(self):

        f, g = self.setup_functions()
        
        xs = torch.linspace(-3.0, 5.0, 11)

        h = f.combine(2.0, g, -3.0)
        self.assertTrue((h(xs) - (4.0*xs - 1.0)).abs().max() < 1e-12)
        self.assertTrue(((f - g)(xs) - 2.0*xs).abs().max() < 1e-12)
        self.assertTrue(((3.0 * f)(xs) - (6.0*xs + 3.0)).abs().max() < 1e-12)

        f2 = f * f
        self.assertEqual(f2.basis.order, 6)
        self.assertTrue((f2(xs) - (2.0*xs + 1.0) ** 2).abs().max() < 1e-10)
        self.assertAlmostEqual(float(f2.integrate()), 728.0/3.0, places=8)
        return

    def test_compress(self):

        poly = ft.Legendre(order=6)
        domain = ft.BoundedDomain(torch.tensor([0.0, 2.0]))
        f = ft.UnivariateFunction.approximate(lambda xs: xs ** 2 - xs, poly, domain)

        f_small = f.compress(tol=1e-12)
        xs = torch.linspace(0.0, 2.0, 7)

        self.assertEqual(f_small.basis.order, 2)
        self.assertTrue((f_small(xs) - f(xs)).abs().max() < 1e-12)
        return

    def test_fourier(self):

        poly = ft.Fourier(order=3)
        domain = ft.BoundedDomain(torch.tensor([0.0, 2.0]))
        f = ft.UnivariateFunction.approximate(lambda xs: torch.sin(torch.pi * xs), poly, domain)

        xs = torch.rand(20) * 2.0
        
        self.assertTrue((f(xs) - torch.sin(torch.pi * xs)).abs().max() < 1e-12)
        self.assertAlmostEqual(float(f.integrate()), 0.0, places=12)
        self.assertAlmostEqual(float(f.inner(f)), 1.0, places=12)
        return

    def test_domain_mismatch(self):

        f, _ = self.setup_functions()
        g = ft.UnivariateFunction.constant(
            1.0, 
            ft.Legendre(order=3), 
            ft.BoundedDomain(torch.tensor([-3.0, 4.0]))
        )
        h = ft.UnivariateFunction.constant(
            1.0, 
            ft.Lagrange1(num_elems=3), 
            ft.BoundedDomain(torch.tensor([-3.0, 5.0]))
        )

        with self.assertRaises(ft.DomainMismatch):
            f.inner(g)
        with self.assertRaises(ft.DomainMismatch):
            f + h
        with self.assertRaises(ft.ShapeMismatch):
            ft.UnivariateFunction(ft.Legendre(order=3), f.domain, torch.zeros(3))
        return


if __name__ == "__main__":
    unittest.main()

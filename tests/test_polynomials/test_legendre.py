import unittest

import torch

import functrain as ft


torch.manual_seed(0)


class TestLegendre(unittest.TestCase):
    
    def test_properties(self):
        """Confirms that some simple properties of Legendre polynomials
        are initialised correctly.
        """

        poly = ft.Legendre(order=3)

        a_true = torch.tensor([1., 3./2., 5./3., 7./4.])
        b_true = torch.tensor([0., 0., 0., 0.])
        c_true = torch.tensor([0., 1./2., 2./3., 3./4.])
        norm_true = torch.tensor([1., 3.**0.5, 5.**0.5, 7.**0.5])

        self.assertEqual(poly.order, 3)
        self.assertEqual(poly.cardinality, 4)
        self.assertEqual(poly.kwargs, {"order": 3})
        self.assertTrue((poly.a - a_true).abs().max() < 1e-8)
        self.assertTrue((poly.b - b_true).abs().max() < 1e-8)
        self.assertTrue((poly.c - c_true).abs().max() < 1e-8)
        self.assertTrue((poly.norm - norm_true).abs().max() < 1e-8)
        return

    def test_eval_basis(self):

        poly = ft.Legendre(order=3)

        ls = torch.tensor([-1., -0.5, 0., 0.5, 1.])
        norm_true = torch.tensor([1., 3.**0.5, 5.**0.5, 7.**0.5])

        ps = poly.eval_basis(ls)
        ps_true = torch.tensor([[1., -1., 1., -1.],
                                [1., -1./2., -1./8., 7./16.],
                                [1., 0., -1./2., 0.],
                                [1., 1./2., -1./8., -7./16.],
                                [1., 1., 1., 1.]]) * norm_true

        dpdxs = poly.eval_basis_deriv(ls)
        dpdxs_true = torch.tensor([[0., 1., -3., 6.],
                                   [0., 1., -3./2., 9./24.],
                                   [0., 1., 0., -3./2.],
                                   [0., 1., 3./2., 9./24.],
                                   [0., 1., 3., 6.]]) * norm_true

        self.assertTrue((ps - ps_true).abs().max() < 1e-8)
        self.assertTrue((dpdxs - dpdxs_true).abs().max() < 1e-8)
        return

    def test_quadrature(self):
        """Checks that the Gauss quadrature rules integrate polynomials 
        of the requested degree exactly.
        """

        poly = ft.Legendre(order=3)

        ls, ws = poly.quadrature(degree=5)
        self.assertEqual(ls.numel(), 3)
        self.assertAlmostEqual(float(ws.sum()), 1.0)
        self.assertAlmostEqual(float(ws @ ls**4), 1.0/5.0)

        # Basis should be orthonormal with respect to the weight 1/2
        ls, ws = poly.quadrature(degree=2*poly.degree)
        ps = poly.eval_basis(ls)
        gram = ps.T @ (ws[:, None] * ps)
        self.assertTrue((gram - torch.eye(4)).abs().max() < 1e-12)

        int_W_true = torch.tensor([2., 0., 0., 0.])
        self.assertTrue((poly.int_W - int_W_true).abs().max() < 1e-12)
        self.assertTrue((poly.mass - 2.0*torch.eye(4)).abs().max() < 1e-12)
        return

    def test_product(self):
        """Checks that the product of two polynomials is computed 
        exactly.
        """

        poly_a = ft.Legendre(order=2)
        poly_b = ft.Legendre(order=3)
        
        coeffs_a = torch.randn((3, 4))
        coeffs_b = torch.randn((4, 4))

        poly_prod, coeffs_prod = poly_a.product(coeffs_a, poly_b, coeffs_b)

        ls = torch.linspace(-1.0, 1.0, 21)
        fls_true = poly_a.eval_radon(coeffs_a, ls) * poly_b.eval_radon(coeffs_b, ls)
        fls = poly_prod.eval_radon(coeffs_prod, ls)

        self.assertEqual(poly_prod.order, 5)
        self.assertTrue((fls - fls_true).abs().max() < 1e-12)
        return

    def test_convert_compress(self):

        poly = ft.Legendre(order=5)

        coeffs = torch.tensor([[1.0], [2.0], [-0.5], [0.0], [1e-16], [0.0]])
        poly_small, coeffs_small = poly.compress(coeffs, tol=1e-14)

        self.assertEqual(poly_small.order, 2)
        self.assertTrue((coeffs_small.flatten() - torch.tensor([1.0, 2.0, -0.5])).abs().max() < 1e-14)

        coeffs_large = poly_small.convert(coeffs_small, ft.Legendre(order=4))
        self.assertEqual(coeffs_large.shape, torch.Size([5, 1]))
        self.assertTrue((coeffs_large[:3] - coeffs_small).abs().max() < 1e-14)
        self.assertTrue(coeffs_large[3:].abs().max() < 1e-14)

        self.assertIs(poly_small.promote(poly), poly)
        return

    def test_cross_mass(self):

        poly_a = ft.Legendre(order=2)
        poly_b = ft.Legendre(order=4)
        
        C = poly_a.cross_mass(poly_b)
        C_true = torch.zeros((3, 5))
        C_true[:3, :3] = 2.0 * torch.eye(3)

        self.assertTrue((C - C_true).abs().max() < 1e-12)

        with self.assertRaises(ft.DomainMismatch):
            poly_a.cross_mass(ft.Fourier(order=2))
        return


if __name__ == "__main__":
    unittest.main()

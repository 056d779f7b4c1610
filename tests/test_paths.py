from faultline.services.paths import PathFilter


def test_prefix_replaced_once():
    f = PathFilter(['/home/app'])
    assert f.filter('/home/app/src/x.ext') == '../src/x.ext'


def test_separators_normalized():
    f = PathFilter('C:\\srv\\bot')
    assert f.filter('C:\\srv\\bot\\handlers\\main.py') == '../handlers/main.py'
    assert f.filters == ['C:/srv/bot']


def test_filters_applied_in_order():
    f = PathFilter()
    f.set_filters(['/srv/app', '/srv'])
    assert f.filter('/srv/app/x.py') == '../x.py'
    assert f.filter('/srv/other/y.py') == '../other/y.py'


def test_set_filters_replaces_previous():
    f = PathFilter(['/a'])
    f.set_filters(['/b'])
    assert f.filter('/a/x.py') == '/a/x.py'
    assert f.filter('/b/x.py') == '../x.py'


def test_no_filters_only_normalizes():
    assert PathFilter().filter('dir\\x.py') == 'dir/x.py'
